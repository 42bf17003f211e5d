# fitflow/core/exceptions.py
"""
Errors raised by FitFlow services.

Each class fixes the HTTP status it is rendered with; ``code`` is the
machine-readable reason clients branch on (``SLOT_FULL``, ``DUPLICATE_RATING``).
"""

from typing import Any, Dict, Optional

from fastapi import status


class DomainException(Exception):
    """Base class for every error a service raises on purpose."""

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


class ValidationException(DomainException):
    """Input passed schema validation but breaks a business rule."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedException(DomainException):
    """No usable credential was presented."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    """The caller is known but may not do this."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """The write collides with current state."""

    status_code = status.HTTP_409_CONFLICT


class ServiceException(DomainException):
    """Unexpected failure inside a service, surfaced as 500."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message or "An error occurred processing your request",
            code=code,
            details=details,
        )


# Reservation, rating and lifecycle conflicts


class SlotFullException(ConflictException):
    """Raised when a slot has no remaining seats."""

    def __init__(self, trainer_id: str, slot_id: str, max_participants: Optional[int] = None):
        details: Dict[str, Any] = {"trainer_id": trainer_id, "slot_id": slot_id}
        if max_participants is not None:
            details["max_participants"] = max_participants
        super().__init__(
            message="This slot is fully booked",
            code="SLOT_FULL",
            details=details,
        )


class BookingConflictException(ConflictException):
    """Raised when a reservation could not be committed against its slot."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "The slot changed while the booking was being reserved",
            code="BOOKING_CONFLICT",
            details=details or {},
        )


class DuplicateRatingException(ConflictException):
    """Raised when a principal rates the same trainer twice."""

    def __init__(self, trainer_id: str):
        super().__init__(
            message="You have already rated this trainer",
            code="DUPLICATE_RATING",
            details={"trainer_id": trainer_id},
        )


class DuplicateReviewException(ConflictException):
    """Raised when a booking has already been reviewed."""

    def __init__(self, booking_id: str):
        super().__init__(
            message="This booking has already been reviewed",
            code="DUPLICATE_REVIEW",
            details={"booking_id": booking_id},
        )


class InvalidStatusTransitionException(ConflictException):
    """Raised when a trainer application is moved out of a terminal state."""

    def __init__(self, current: str, requested: str):
        super().__init__(
            message=f"Cannot change trainer status from '{current}' to '{requested}'",
            code="INVALID_STATUS_TRANSITION",
            details={"current": current, "requested": requested},
        )


class RepositoryException(Exception):
    """A data access call failed for a reason other than a constraint."""
