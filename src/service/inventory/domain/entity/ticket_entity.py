from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import ConflictError
from src.service.inventory.domain.enum.inventory_status import TicketStatus
from src.service.inventory.domain.enum.payment_method import PaymentMethod
from src.service.inventory.domain.enum.unit_kind import UnitKind
from src.service.inventory.domain.inventory_errors import InvalidTicketTransitionError
from src.service.inventory.domain.value_object.sale_context import SaleContext
from src.service.inventory.domain.value_object.ticket_code import generate_ticket_code


@attrs.define
class Ticket:
    id: UUID
    code: str
    event_id: UUID
    hold_id: UUID
    price: int
    payment_method: PaymentMethod
    status: TicketStatus = TicketStatus.VALID
    tier_id: Optional[UUID] = None
    seat_id: Optional[UUID] = None
    seat_label: Optional[str] = None
    order_id: Optional[str] = None
    staff_sale_id: Optional[UUID] = None
    attendee_id: Optional[str] = None
    attendee_name: Optional[str] = None
    attendee_email: Optional[str] = None
    transferred_from_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def issue(
        cls,
        *,
        event_id: UUID,
        hold_id: UUID,
        list_price: int,
        sale_context: SaleContext,
        now: datetime,
        tier_id: Optional[UUID] = None,
        seat_id: Optional[UUID] = None,
        seat_label: Optional[str] = None,
    ) -> 'Ticket':
        return cls(
            id=uuid7(),
            code=generate_ticket_code(),
            event_id=event_id,
            hold_id=hold_id,
            tier_id=tier_id,
            seat_id=seat_id,
            seat_label=seat_label,
            price=sale_context.price_for(list_price),
            payment_method=sale_context.payment_method,
            order_id=sale_context.order_id,
            staff_sale_id=sale_context.staff_sale_id,
            attendee_id=sale_context.attendee_id,
            attendee_name=sale_context.attendee_name,
            attendee_email=sale_context.attendee_email,
            created_at=now,
            updated_at=now,
        )

    @property
    def unit_kind(self) -> UnitKind:
        return UnitKind.SEAT if self.seat_id is not None else UnitKind.TIER

    def void(self, now: datetime) -> 'Ticket':
        if self.status != TicketStatus.VALID:
            raise InvalidTicketTransitionError(f'Cannot void a {self.status} ticket')
        return attrs.evolve(self, status=TicketStatus.VOID, updated_at=now)

    def mark_used(self, now: datetime) -> 'Ticket':
        if self.status == TicketStatus.USED:
            raise InvalidTicketTransitionError('Ticket has already been used')
        if self.status != TicketStatus.VALID:
            raise InvalidTicketTransitionError(f'Cannot admit a {self.status} ticket')
        return attrs.evolve(self, status=TicketStatus.USED, updated_at=now)

    def transfer_to(
        self,
        *,
        now: datetime,
        attendee_name: Optional[str],
        attendee_email: Optional[str],
        attendee_id: Optional[str] = None,
    ) -> tuple['Ticket', 'Ticket']:
        """Returns (retired original, fresh ticket for the recipient on the same unit)"""
        if self.status != TicketStatus.VALID:
            raise InvalidTicketTransitionError(f'Cannot transfer a {self.status} ticket')
        retired = attrs.evolve(self, status=TicketStatus.TRANSFERRED, updated_at=now)
        reissued = attrs.evolve(
            self,
            id=uuid7(),
            code=generate_ticket_code(),
            status=TicketStatus.VALID,
            attendee_id=attendee_id,
            attendee_name=attendee_name,
            attendee_email=attendee_email,
            transferred_from_id=self.id,
            created_at=now,
            updated_at=now,
        )
        return retired, reissued

    def claim(self, *, attendee_id: str, now: datetime) -> 'Ticket':
        if self.status != TicketStatus.VALID:
            raise InvalidTicketTransitionError(f'Cannot claim a {self.status} ticket')
        if self.attendee_id and self.attendee_id != attendee_id:
            raise ConflictError('Ticket has already been claimed')
        return attrs.evolve(self, attendee_id=attendee_id, updated_at=now)
