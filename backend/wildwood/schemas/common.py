"""
Wildwood Zoo Backend — Shared Pydantic Schemas
================================================

What:  Envelopes shared by every router (message, error, health) and the
       `PatchModel` base used by all update bodies.

Patch structures:
    Update bodies declare every field Optional with no default beyond None.
    `changes()` returns only the fields the client actually sent, and raises
    ValidationError (400) when that set is empty, or when a field outside
    `nullable_fields` was sent as an explicit null. Services call it before
    they build any query, so a bad patch never reaches the database.
"""

from typing import Any, ClassVar, Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field

from wildwood.exceptions import ValidationError


class MessageResponse(BaseModel):
    message: str = Field(description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """
    What:  Standard error envelope returned by every failing endpoint.
    How:   Produced by the global exception handlers in main.py; `request_id`
           matches the X-Request-ID header for log correlation.
    """
    error: str = Field(description="User-safe error message")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database status: connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since process start")


class PatchModel(BaseModel):
    """Base class for partial-update bodies."""

    # Unknown keys are dropped, so a body of only unknown keys is an empty patch
    model_config = ConfigDict(extra="ignore")

    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    def changes(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        if not data:
            raise ValidationError(message="No valid fields provided for update")
        for name, value in data.items():
            if value is None and name not in self.nullable_fields:
                raise ValidationError(message=f"Field '{name}' cannot be null", field=name)
        return data


_ERROR_DESCRIPTIONS = {
    400: "Invalid input",
    401: "Missing bearer token",
    403: "Invalid token or insufficient permissions",
    404: "Resource not found",
    429: "Too many attempts",
    500: "Server error",
}


def error_responses(*codes: int) -> Dict[int, Dict[str, Any]]:
    """OpenAPI `responses` entries for the given error status codes."""
    return {
        code: {"description": _ERROR_DESCRIPTIONS[code], "model": ErrorResponse}
        for code in codes
    }
