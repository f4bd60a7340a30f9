from src.service.inventory.domain.enum.actor_kind import ActorKind
from src.service.inventory.domain.enum.inventory_status import (
    HoldStatus,
    SeatStatus,
    TicketStatus,
    WaitlistStatus,
)
from src.service.inventory.domain.enum.payment_method import CommissionType, PaymentMethod
from src.service.inventory.domain.enum.unit_kind import ContainerType, UnitKind

__all__ = [
    'ActorKind',
    'CommissionType',
    'ContainerType',
    'HoldStatus',
    'PaymentMethod',
    'SeatStatus',
    'TicketStatus',
    'UnitKind',
    'WaitlistStatus',
]
