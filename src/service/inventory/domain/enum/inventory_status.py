from enum import StrEnum


class HoldStatus(StrEnum):
    ACTIVE = 'active'
    CONFIRMED = 'confirmed'
    EXPIRED = 'expired'
    CANCELLED = 'cancelled'

    @property
    def is_released(self) -> bool:
        return self in (HoldStatus.EXPIRED, HoldStatus.CANCELLED)


class SeatStatus(StrEnum):
    AVAILABLE = 'available'
    HELD = 'held'
    RESERVED = 'reserved'
    BLOCKED = 'blocked'


class TicketStatus(StrEnum):
    VALID = 'valid'
    USED = 'used'
    VOID = 'void'
    TRANSFERRED = 'transferred'


class WaitlistStatus(StrEnum):
    ACTIVE = 'active'
    NOTIFIED = 'notified'
    CANCELLED = 'cancelled'
