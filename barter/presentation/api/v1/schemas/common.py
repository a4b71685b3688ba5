"""Shared schema plumbing: camelCase aliases and the response envelope."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python.

    ``from_attributes`` lets responses be built straight from application DTOs.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel):
    """Envelope shared by every endpoint: ``{success, message?, ...payload}``."""

    success: bool = True
    message: str | None = None


class ErrorResponse(ApiResponse):
    """Error envelope.

    Example:
        {
            "success": false,
            "error": "ConflictError",
            "message": "Trade was modified concurrently, re-fetch and retry",
            "details": {"tradeId": 42}
        }
    """

    success: bool = False
    error: str
    details: Any | None = None
