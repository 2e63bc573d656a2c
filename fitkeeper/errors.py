# backend/fitkeeper/errors.py
from typing import Any, Dict, Optional


class ApiError(Exception):
    """
    Base class for errors that map onto a JSON error response.

    Handlers registered in create_app() turn these into:
      { "success": false, "message": "...", "error": "<code>", ...extra }
    """

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}

    def to_dict(self) -> Dict[str, Any]:
        payload = {"success": False, "message": self.message, "error": self.code}
        payload.update(self.extra)
        return payload


class ValidationError(ApiError):
    status_code = 400
    code = "validation_error"


class MissingRequiredFieldError(ValidationError):
    code = "missing_required_field"

    def __init__(self, labels):
        self.labels = list(labels)
        super().__init__(
            f"Missing required measurement items: {', '.join(self.labels)}",
            {"missing": self.labels},
        )


class InvalidRecordError(ValidationError):
    code = "invalid_record"


class AuthenticationError(ApiError):
    status_code = 401
    code = "authentication_error"


class AuthorizationError(ApiError):
    status_code = 403
    code = "authorization_error"


class NotFoundError(ApiError):
    status_code = 404
    code = "not_found"


class UpstreamError(ApiError):
    status_code = 502
    code = "upstream_error"


class UpstreamAuthError(UpstreamError):
    code = "upstream_auth_error"


class InternalError(ApiError):
    status_code = 500
    code = "internal_error"
