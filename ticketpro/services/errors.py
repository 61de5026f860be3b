"""Domain error codes shared by the services and rendered by the API layer."""

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    GROUP_TICKET_NOT_FOUND = "GROUP_TICKET_NOT_FOUND"
    GROUP_TICKET_IN_USE = "GROUP_TICKET_IN_USE"
    NO_TICKETS_REMAINING = "NO_TICKETS_REMAINING"
    PACKAGE_TYPE_MISMATCH = "PACKAGE_TYPE_MISMATCH"
    PASSENGER_NOT_FOUND = "PASSENGER_NOT_FOUND"
    PASSENGER_ALREADY_ASSIGNED = "PASSENGER_ALREADY_ASSIGNED"
    PASSENGER_NOT_ASSIGNED = "PASSENGER_NOT_ASSIGNED"
    TICKET_BATCH_NOT_FOUND = "TICKET_BATCH_NOT_FOUND"
    SOLD_OUT = "SOLD_OUT"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    CONFIRMATION_REQUIRED = "CONFIRMATION_REQUIRED"


class DomainError(Exception):
    """Base domain error with code, user-safe message and HTTP status."""

    status_code = 400

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def extra(self) -> dict[str, Any]:
        return {}

    def to_detail(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message, **self.extra()}


class ValidationFailedError(DomainError):
    """Raised when a payload fails field or business-rule validation."""

    status_code = 422

    def __init__(self, result) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_FAILED,
            message="; ".join(result.errors) or "Validation failed",
        )
        self.result = result

    def extra(self) -> dict[str, Any]:
        return {"errors": list(self.result.errors), "warnings": list(self.result.warnings)}


class NotFoundError(DomainError):
    status_code = 404


class GroupTicketNotFoundError(NotFoundError):
    def __init__(self, group_ticket_id: int) -> None:
        super().__init__(code=ErrorCode.GROUP_TICKET_NOT_FOUND, message="Group ticket not found")
        self.group_ticket_id = group_ticket_id


class PassengerNotFoundError(NotFoundError):
    def __init__(self, passenger_type: str, passenger_id: int) -> None:
        super().__init__(code=ErrorCode.PASSENGER_NOT_FOUND, message=f"Umrah {passenger_type} passenger not found")
        self.passenger_type = passenger_type
        self.passenger_id = passenger_id


class TicketBatchNotFoundError(NotFoundError):
    def __init__(self, batch_id: int) -> None:
        super().__init__(code=ErrorCode.TICKET_BATCH_NOT_FOUND, message="Ticket batch not found")
        self.batch_id = batch_id


class BookingNotFoundError(NotFoundError):
    def __init__(self, booking_id: int) -> None:
        super().__init__(code=ErrorCode.BOOKING_NOT_FOUND, message="Booking not found")
        self.booking_id = booking_id


class ConflictError(DomainError):
    status_code = 409


class GroupTicketInUseError(ConflictError):
    """Deleting a group ticket that still has passengers needs an explicit force."""

    def __init__(self, group_ticket_id: int, passengers: list[dict]) -> None:
        super().__init__(
            code=ErrorCode.GROUP_TICKET_IN_USE,
            message=f"{len(passengers)} passenger(s) are assigned to this group ticket",
        )
        self.group_ticket_id = group_ticket_id
        self.passengers = passengers

    def extra(self) -> dict[str, Any]:
        return {
            "can_force_delete": True,
            "assigned_count": len(self.passengers),
            "passengers": self.passengers,
        }


class NoTicketsRemainingError(ConflictError):
    def __init__(self, group_ticket_id: int) -> None:
        super().__init__(code=ErrorCode.NO_TICKETS_REMAINING, message="No tickets remaining in this group")
        self.group_ticket_id = group_ticket_id


class PackageTypeMismatchError(ConflictError):
    def __init__(self, package_type: str, passenger_type: str) -> None:
        super().__init__(
            code=ErrorCode.PACKAGE_TYPE_MISMATCH,
            message=f"A {package_type} group ticket cannot be used for a {passenger_type} passenger",
        )


class PassengerAlreadyAssignedError(ConflictError):
    def __init__(self, passenger_id: int, group_ticket_id: int) -> None:
        super().__init__(
            code=ErrorCode.PASSENGER_ALREADY_ASSIGNED,
            message=f"Passenger is already assigned to group ticket {group_ticket_id}",
        )
        self.passenger_id = passenger_id
        self.group_ticket_id = group_ticket_id

    def extra(self) -> dict[str, Any]:
        return {"group_ticket_id": self.group_ticket_id}


class PassengerNotAssignedError(ConflictError):
    def __init__(self, passenger_id: int) -> None:
        super().__init__(code=ErrorCode.PASSENGER_NOT_ASSIGNED, message="Passenger is not assigned to a group ticket")
        self.passenger_id = passenger_id


class SoldOutError(ConflictError):
    def __init__(self, batch_id: int) -> None:
        super().__init__(code=ErrorCode.SOLD_OUT, message="No tickets available in this batch")
        self.batch_id = batch_id


class ConfirmationRequiredError(ConflictError):
    """The action is legal but must be repeated with an explicit confirmation."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(code=ErrorCode.CONFIRMATION_REQUIRED, message=message)
        self.context = context

    def extra(self) -> dict[str, Any]:
        return {"requires_confirmation": True, **self.context}


class PermissionDeniedError(DomainError):
    status_code = 403

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.PERMISSION_DENIED, message=message)
