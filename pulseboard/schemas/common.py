"""Shared response envelopes."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ActionResult(BaseModel, Generic[T]):
    """Tagged result returned by every mutating endpoint."""

    success: bool = Field(
        True,
        description="Always true on this shape; failures use ErrorResponse",
    )
    data: Optional[T] = Field(
        None,
        description="The created or updated resource",
    )
    message: Optional[str] = Field(
        None,
        description="Optional human-readable outcome",
        examples=["Workflow published"],
    )


class ErrorResponse(BaseModel):
    """Body returned for any expected failure."""

    success: bool = False
    error: str = Field(
        ...,
        description="User-facing error message",
        examples=["Not authorized to edit tasks"],
    )
