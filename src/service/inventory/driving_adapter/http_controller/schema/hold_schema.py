from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.enum.payment_method import PaymentMethod
from src.service.inventory.domain.value_object.sale_context import SaleContext
from src.service.inventory.driving_adapter.http_controller.schema.common_schema import (
    ActorSchema,
    SeatRefSchema,
    TicketResponse,
)


class HoldCreateRequest(BaseModel):
    """
    Exactly one way of picking units:
    - seats: explicit seats
    - section_id (+ row_id): best available seats
    - tier_id: unassigned tier tickets
    """

    event_id: UUID
    actor: Optional[ActorSchema] = None
    quantity: int = Field(default=1, ge=1)
    tier_id: Optional[UUID] = None
    seats: List[SeatRefSchema] = []
    section_id: Optional[str] = None
    row_id: Optional[str] = None
    ttl_seconds: Optional[int] = None
    payment_ref: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            'examples': [
                {
                    'event_id': '00000000-0000-0000-0000-000000000001',
                    'actor': {'kind': 'buyer_session', 'id': 'sess_8f2c1a'},
                    'tier_id': '00000000-0000-0000-0000-000000000002',
                    'quantity': 2,
                },
                {
                    'event_id': '00000000-0000-0000-0000-000000000001',
                    'actor': {'kind': 'buyer_session', 'id': 'sess_8f2c1a'},
                    'seats': [{'section_id': 'A', 'row_id': '1', 'seat_id': '5'}],
                    'payment_ref': 'pi_3Nk2',
                },
            ]
        }
    )


class HoldItemResponse(BaseModel):
    kind: str
    quantity: int
    tier_id: Optional[UUID] = None
    seat_id: Optional[UUID] = None
    seat_label: Optional[str] = None


class HoldResponse(BaseModel):
    id: UUID
    event_id: UUID
    actor_kind: str
    actor_id: str
    status: str
    items: List[HoldItemResponse]
    created_at: datetime
    expires_at: datetime
    payment_ref: Optional[str] = None
    tickets: List[TicketResponse] = []

    @classmethod
    def from_entity(
        cls, hold: Hold, *, status: Optional[str] = None, tickets: Optional[list] = None
    ) -> 'HoldResponse':
        return cls(
            id=hold.id,
            event_id=hold.event_id,
            actor_kind=hold.actor.kind.value,
            actor_id=hold.actor.id,
            status=status or hold.status.value,
            items=[
                HoldItemResponse(
                    kind=item.kind.value,
                    quantity=item.quantity,
                    tier_id=item.tier_id,
                    seat_id=item.seat_id,
                    seat_label=str(item.seat_ref) if item.seat_ref else None,
                )
                for item in hold.items
            ],
            created_at=hold.created_at,
            expires_at=hold.expires_at,
            payment_ref=hold.payment_ref,
            tickets=[TicketResponse.from_entity(ticket) for ticket in tickets or []],
        )


class SaleContextSchema(BaseModel):
    payment_method: PaymentMethod = PaymentMethod.STRIPE
    order_id: Optional[str] = None
    attendee_id: Optional[str] = None
    attendee_name: Optional[str] = None
    attendee_email: Optional[str] = None

    def to_value(self) -> SaleContext:
        return SaleContext(
            payment_method=self.payment_method,
            order_id=self.order_id,
            attendee_id=self.attendee_id,
            attendee_name=self.attendee_name,
            attendee_email=self.attendee_email,
        )


class HoldConfirmRequest(SaleContextSchema):
    actor: Optional[ActorSchema] = None


class HoldCancelRequest(BaseModel):
    actor: Optional[ActorSchema] = None


class ConfirmResponse(BaseModel):
    hold_id: UUID
    tickets: List[TicketResponse]


class SweepRequest(BaseModel):
    limit: Optional[int] = Field(default=None, ge=1)


class SweepResponse(BaseModel):
    expired: int


class PaymentCallbackRequest(SaleContextSchema):
    payment_ref: str
    outcome: Literal['succeeded', 'failed']

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'payment_ref': 'pi_3Nk2',
                'outcome': 'succeeded',
                'payment_method': 'stripe',
                'order_id': 'ord_1001',
            }
        }
    )


class PaymentCallbackResponse(BaseModel):
    payment_ref: str
    outcome: str
    hold_status: Optional[str] = None
    tickets: List[TicketResponse] = []
