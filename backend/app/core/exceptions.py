# backend/app/core/exceptions.py
"""
Domain-specific exceptions for the TrainerLocator platform.

Services raise these with business-focused messages; the API layer
converts them into HTTP errors via ``to_http_exception``.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Carries a message, a stable error code and optional details."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """A request is well-formed but breaks a business rule."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Missing, or hidden from the caller (inactive trainers)."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Duplicate email, second profile, second review, schedule overlap."""

    status_code = status.HTTP_409_CONFLICT


class UnauthorizedException(DomainException):
    """Bad credentials or a deactivated account."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def to_http_exception(self) -> HTTPException:
        exc = super().to_http_exception()
        exc.headers = {"WWW-Authenticate": "Bearer"}
        return exc


class ForbiddenException(DomainException):
    """Caller is authenticated but not a participant, owner or admin."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when the database fails underneath a service operation (500)."""

    def __init__(self, message: str = "An error occurred processing your request"):
        super().__init__(message, code="SERVICE_ERROR")


# Specific business exceptions


class BookingConflictException(ConflictException):
    """Raised when a requested session overlaps the trainer's existing schedule."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "Trainer has a conflicting session at this time",
            code="BOOKING_CONFLICT",
            details=details or {},
        )


class TrainerUnavailableException(ValidationException):
    """Raised when the trainer does not work on the requested weekday."""

    def __init__(self, day: str):
        super().__init__(
            message="Trainer is not available on this day",
            code="TRAINER_UNAVAILABLE",
            details={"day": day},
        )


class NoServicesAvailableException(ValidationException):
    """Raised when a booking targets a trainer with an empty service catalog."""

    def __init__(self, trainer_id: str):
        super().__init__(
            message="Trainer has no services available",
            code="NO_SERVICES_AVAILABLE",
            details={"trainer_id": trainer_id},
        )


class RepositoryException(Exception):
    """Data access failure; services turn it into ServiceException."""
