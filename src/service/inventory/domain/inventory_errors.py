"""
Inventory error taxonomy

Every error is a CustomBaseError, so @Logger.io logs it once without a
traceback and the FastAPI handler returns `{"detail": message}` with its
status code. InventoryConflictError is the exception: it signals broken
inventory accounting and is logged at CRITICAL by the finalizer.
"""

from src.platform.exception.exceptions import ConflictError, DomainError, GoneError, NotFoundError


# ========== Capacity / contention (409) ==========


class OversellError(ConflictError):
    def __init__(self, message: str = 'Unit cannot be sold without exceeding capacity') -> None:
        super().__init__(message)


class SeatUnavailableError(ConflictError):
    def __init__(self, message: str = 'Seat is not available') -> None:
        super().__init__(message)


class HoldConflictError(ConflictError):
    def __init__(self, message: str = 'Not enough tickets available') -> None:
        super().__init__(message)


class StaffQuotaExceededError(ConflictError):
    def __init__(self, message: str = 'Staff allocation has no tickets left') -> None:
        super().__init__(message)


class InventoryConflictError(ConflictError):
    def __init__(self, message: str = 'Inventory changed underneath a confirmed hold') -> None:
        super().__init__(message)


# ========== Hold lifecycle ==========


class HoldExpiredError(GoneError):
    def __init__(self, message: str = 'Hold has expired') -> None:
        super().__init__(message)


class HoldNotActiveError(DomainError):
    def __init__(self, message: str = 'Hold is no longer active') -> None:
        super().__init__(message, 400)


# ========== Validation (400) ==========


class InvalidTicketTransitionError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class TierNotOnSaleError(DomainError):
    def __init__(self, message: str = 'Ticket tier is not on sale') -> None:
        super().__init__(message, 400)


class MissingActorError(DomainError):
    def __init__(self, message: str = 'Actor identity is required') -> None:
        super().__init__(message, 400)


class InventoryInUseError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


# ========== Not found (404) ==========


class TierNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Ticket tier not found') -> None:
        super().__init__(message)


class SeatNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Seat not found') -> None:
        super().__init__(message)


class HoldNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Hold not found') -> None:
        super().__init__(message)


class TicketNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Ticket not found') -> None:
        super().__init__(message)


class StaffAllocationNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Staff allocation not found') -> None:
        super().__init__(message)


class WaitlistEntryNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Waitlist entry not found') -> None:
        super().__init__(message)
