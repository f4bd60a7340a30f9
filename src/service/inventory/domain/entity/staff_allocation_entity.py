from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.enum.payment_method import CommissionType, PaymentMethod
from src.service.inventory.domain.inventory_errors import StaffQuotaExceededError


def _round_cents(value: Decimal) -> int:
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


@attrs.define
class StaffAllocation:
    """
    Block of a tier's tickets a staff member may sell for cash.

    While active, `allocated_tickets - tickets_sold` units sit in the tier's
    staff_reserved counter and are invisible to public checkout.
    """

    id: UUID
    event_id: UUID
    tier_id: UUID
    staff_user_id: str
    allocated_tickets: int
    commission_type: CommissionType = CommissionType.PERCENTAGE
    commission_value: Decimal = Decimal('0')
    name: Optional[str] = None
    tickets_sold: int = 0
    commission_earned: int = 0  # cents
    cash_collected: int = 0  # cents
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        event_id: UUID,
        tier_id: UUID,
        staff_user_id: str,
        allocated_tickets: int,
        commission_type: CommissionType,
        commission_value: Decimal,
        now: datetime,
        name: Optional[str] = None,
    ) -> 'StaffAllocation':
        if not staff_user_id:
            raise DomainError('staff_user_id is required', 400)
        if allocated_tickets < 1:
            raise DomainError('Allocated tickets must be at least 1', 400)
        cls._validate_commission(commission_type, commission_value)
        return cls(
            id=uuid7(),
            event_id=event_id,
            tier_id=tier_id,
            staff_user_id=staff_user_id,
            name=name,
            allocated_tickets=allocated_tickets,
            commission_type=commission_type,
            commission_value=commission_value,
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def _validate_commission(commission_type: CommissionType, commission_value: Decimal) -> None:
        if commission_value < 0:
            raise DomainError('Commission must not be negative', 400)
        if commission_type == CommissionType.PERCENTAGE and commission_value > 100:
            raise DomainError('Percentage commission must not exceed 100', 400)

    @property
    def remaining(self) -> int:
        return self.allocated_tickets - self.tickets_sold

    @property
    def reserved_units(self) -> int:
        """Units this allocation currently keeps in the tier's staff_reserved counter"""
        return self.remaining if self.is_active else 0

    def ensure_can_sell(self, quantity: int) -> None:
        if not self.is_active:
            raise DomainError('Staff allocation is not active', 400)
        if quantity < 1:
            raise DomainError('Quantity must be at least 1', 400)
        if self.remaining < quantity:
            raise StaffQuotaExceededError(
                f'Staff allocation has {self.remaining} of {self.allocated_tickets} tickets left'
            )

    def commission_for(self, *, total_amount: int, quantity: int) -> int:
        match self.commission_type:
            case CommissionType.PERCENTAGE:
                return _round_cents(Decimal(total_amount) * self.commission_value / 100)
            case CommissionType.FIXED:
                return _round_cents(self.commission_value * quantity)

    @staticmethod
    def cash_for(*, total_amount: int, payment_method: PaymentMethod) -> int:
        # CASH_APP settles digitally, only physical cash is collected by staff
        return total_amount if payment_method == PaymentMethod.CASH else 0

    def resize(
        self,
        *,
        now: datetime,
        allocated_tickets: Optional[int] = None,
        is_active: Optional[bool] = None,
        commission_type: Optional[CommissionType] = None,
        commission_value: Optional[Decimal] = None,
    ) -> 'StaffAllocation':
        new_allocated = self.allocated_tickets if allocated_tickets is None else allocated_tickets
        if new_allocated < self.tickets_sold:
            raise DomainError(
                f'Cannot allocate fewer than the {self.tickets_sold} tickets already sold', 400
            )
        new_type = commission_type or self.commission_type
        new_value = self.commission_value if commission_value is None else commission_value
        self._validate_commission(new_type, new_value)
        return attrs.evolve(
            self,
            allocated_tickets=new_allocated,
            is_active=self.is_active if is_active is None else is_active,
            commission_type=new_type,
            commission_value=new_value,
            updated_at=now,
        )


@attrs.define
class StaffSale:
    id: UUID
    allocation_id: UUID
    event_id: UUID
    tier_id: UUID
    hold_id: UUID
    staff_user_id: str
    ticket_count: int
    total_amount: int
    commission_amount: int
    cash_amount: int
    payment_method: PaymentMethod
    buyer_name: Optional[str] = None
    buyer_email: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def record(
        cls,
        *,
        allocation: StaffAllocation,
        hold_id: UUID,
        quantity: int,
        unit_price: int,
        payment_method: PaymentMethod,
        now: datetime,
        buyer_name: Optional[str] = None,
        buyer_email: Optional[str] = None,
    ) -> 'StaffSale':
        if not payment_method.is_staff_method:
            raise DomainError('Staff sales accept cash or Cash App only', 400)
        total_amount = unit_price * quantity
        return cls(
            id=uuid7(),
            allocation_id=allocation.id,
            event_id=allocation.event_id,
            tier_id=allocation.tier_id,
            hold_id=hold_id,
            staff_user_id=allocation.staff_user_id,
            ticket_count=quantity,
            total_amount=total_amount,
            commission_amount=allocation.commission_for(
                total_amount=total_amount, quantity=quantity
            ),
            cash_amount=StaffAllocation.cash_for(
                total_amount=total_amount, payment_method=payment_method
            ),
            payment_method=payment_method,
            buyer_name=buyer_name,
            buyer_email=buyer_email,
            created_at=now,
        )
