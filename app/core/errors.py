"""
API error taxonomy.

Every failure a handler reports maps to exactly one of these. They subclass
HTTPException so routers raise them the same way they raise any HTTP error;
the handlers registered in app.main render them into the response envelope.
"""

from typing import Any

from fastapi import HTTPException, status


class ApiError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"

    def __init__(self, message: str | None = None, errors: list[dict[str, Any]] | None = None):
        super().__init__(status_code=self.status_code, detail=message or self.default_message)
        self.errors = errors


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized to access this route"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to access this route"


class ValidationFailed(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ServerError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"


def validation_errors_from_pydantic(raw_errors) -> list[dict[str, Any]]:
    """Flatten pydantic/FastAPI error dicts into {field, message, location} descriptors."""
    out = []
    for err in raw_errors:
        loc = list(err.get("loc") or ())
        location = str(loc[0]) if loc else "body"
        field_parts = [str(p) for p in loc[1:]] if len(loc) > 1 else []
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        out.append(
            {
                "field": ".".join(field_parts) or location,
                "message": message,
                "location": location,
            }
        )
    return out


def error_body(message: str, errors: list[dict[str, Any]] | None = None) -> dict:
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body
