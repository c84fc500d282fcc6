# skillsync/core/exceptions.py

from typing import Any


class SkillSyncError(Exception):
    """Base class for errors raised by the core and client layers."""

    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(SkillSyncError):
    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class NotFoundError(SkillSyncError):
    status_code = 404


class PermissionDeniedError(SkillSyncError):
    status_code = 403


class AuthenticationError(SkillSyncError):
    status_code = 401


class ExternalServiceError(SkillSyncError):
    """An outbound call to Whereby, Resend or FCM failed."""

    status_code = 502

    def __init__(
        self,
        service: str,
        message: str,
        status: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["service"] = service
        if status is not None:
            details["status"] = status
        self.service = service
        super().__init__(message, details)
