from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.service.inventory.domain.entity.ticket_entity import Ticket
from src.service.inventory.domain.inventory_errors import MissingActorError
from src.service.inventory.domain.value_object.actor import Actor
from src.service.inventory.domain.value_object.sellable_unit import SeatRef


class ActorSchema(BaseModel):
    # Both optional so a missing identity is reported as MissingActorError
    kind: Optional[str] = None
    id: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={'example': {'kind': 'buyer_session', 'id': 'sess_8f2c1a'}}
    )


def require_actor(actor: Optional[ActorSchema]) -> Actor:
    if actor is None:
        raise MissingActorError()
    return Actor.of(kind=actor.kind, id=actor.id)


class SeatRefSchema(BaseModel):
    section_id: str
    row_id: str
    seat_id: str

    def to_value(self) -> SeatRef:
        return SeatRef(section_id=self.section_id, row_id=self.row_id, seat_id=self.seat_id)


class TicketResponse(BaseModel):
    id: UUID
    code: str
    event_id: UUID
    hold_id: UUID
    status: str
    price: int
    payment_method: str
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

    @classmethod
    def from_entity(cls, ticket: Ticket) -> 'TicketResponse':
        return cls(
            id=ticket.id,
            code=ticket.code,
            event_id=ticket.event_id,
            hold_id=ticket.hold_id,
            status=ticket.status.value,
            price=ticket.price,
            payment_method=ticket.payment_method.value,
            tier_id=ticket.tier_id,
            seat_id=ticket.seat_id,
            seat_label=ticket.seat_label,
            order_id=ticket.order_id,
            staff_sale_id=ticket.staff_sale_id,
            attendee_id=ticket.attendee_id,
            attendee_name=ticket.attendee_name,
            attendee_email=ticket.attendee_email,
            transferred_from_id=ticket.transferred_from_id,
            created_at=ticket.created_at,
        )
