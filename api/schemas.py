"""Pydantic schemas for API responses."""

from typing import Self

from pydantic import BaseModel

from services.result import Result


class ResultResponse(BaseModel):
    """JSON shape of a service Result.

    The wrapped exception is rendered as its type name and message only,
    so clients can tell infrastructure failures from validation failures.
    """

    success: bool
    messages: list[str]
    error_type: str | None = None
    error_detail: str | None = None
    cause: "ResultResponse | None" = None

    @classmethod
    def from_result(cls, result: Result) -> Self:
        exc = result.exception
        return cls(
            success=result.success,
            messages=list(result.messages),
            error_type=type(exc).__name__ if exc is not None else None,
            error_detail=str(exc) if exc is not None else None,
            cause=cls.from_result(result.cause) if result.cause is not None else None,
        )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str


class PoolStatusResponse(BaseModel):
    pool_size: int
    checked_out: int
    overflow: int
    checked_in: int


class DetailedHealthResponse(HealthResponse):
    """Health check response with component status."""

    database: bool
    pool: PoolStatusResponse | None = None
