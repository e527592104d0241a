"""Shared API schema pieces."""

from pydantic import BaseModel, ConfigDict


class ErrorOut(BaseModel):
    """Typed error attached to a result (code + message)."""

    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
