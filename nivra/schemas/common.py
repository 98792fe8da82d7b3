"""
Error envelope shared by every journal endpoint.

Produced by the handlers in nivra/core/errors.py for NivraException,
request validation failures and unexpected errors alike.
"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str = Field(
        description="Machine-readable code, e.g. NO_MOOD_SELECTED or VALIDATION_ERROR.",
        examples=["NO_MOOD_SELECTED"],
    )
    message: str = Field(description="Human-readable message for the UI.")
    details: Optional[dict[str, Any]] = Field(
        default=None,
        description="Context for the code: the rejected mood, or per-field validation errors.",
    )
