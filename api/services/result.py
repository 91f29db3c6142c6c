"""Result: the outcome every mutating service operation returns.

A Result starts successful and becomes failed as soon as an error is added.
It is immutable: every method returns a new Result, so validation layers
compose outcomes instead of appending to shared state.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class Result:
    """Success flag, accumulated messages, and an optional cause.

    Attributes:
        success: False once any error was recorded (here or in ``cause``).
        messages: Human-readable success or error messages, in order.
        exception: Exception raised by an infrastructure failure.
        cause: Nested Result from a validation call that led to this one.
    """

    success: bool = True
    messages: tuple[str, ...] = ()
    exception: BaseException | None = field(default=None, compare=False)
    cause: Result | None = None

    @classmethod
    def ok(cls, message: str | None = None) -> Result:
        return cls() if message is None else cls(messages=(message,))

    @classmethod
    def fail(cls, message: str, exception: BaseException | None = None) -> Result:
        return cls().with_error(message, exception)

    @property
    def failed(self) -> bool:
        return not self.success

    def with_message(self, message: str) -> Result:
        return replace(self, messages=(*self.messages, message))

    def with_error(
        self, message: str, exception: BaseException | None = None
    ) -> Result:
        return replace(
            self,
            success=False,
            messages=(*self.messages, message),
            exception=exception if exception is not None else self.exception,
        )

    def with_cause(self, cause: Result) -> Result:
        """Attach a nested result; a failed cause fails this result too."""
        return replace(self, success=self.success and cause.success, cause=cause)

    def merge(self, other: Result) -> Result:
        """Combine two sibling results into one, keeping both sets of messages.

        When both results carry a cause, the causes are merged the same way.
        """
        if self.cause is not None and other.cause is not None:
            cause = self.cause.merge(other.cause)
        else:
            cause = self.cause or other.cause
        return Result(
            success=self.success and other.success,
            messages=(*self.messages, *other.messages),
            exception=self.exception or other.exception,
            cause=cause,
        )

    @classmethod
    def combine(cls, results: Iterable[Result]) -> Result:
        combined = cls()
        for result in results:
            combined = combined.merge(result)
        return combined

    def all_messages(self) -> list[str]:
        """Messages of this result followed by those of every nested cause."""
        messages = list(self.messages)
        if self.cause is not None:
            messages.extend(self.cause.all_messages())
        return messages
