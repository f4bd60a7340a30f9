from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.service.inventory.domain.entity.staff_allocation_entity import StaffAllocation
from src.service.inventory.domain.enum.payment_method import CommissionType, PaymentMethod
from src.service.inventory.driving_adapter.http_controller.schema.common_schema import (
    ActorSchema,
    TicketResponse,
)


class StaffAllocationCreateRequest(BaseModel):
    tier_id: UUID
    staff_user_id: str
    allocated_tickets: int = Field(ge=1)
    commission_type: CommissionType = CommissionType.PERCENTAGE
    commission_value: Decimal = Decimal('0')
    name: Optional[str] = None
    actor: Optional[ActorSchema] = None

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'tier_id': '00000000-0000-0000-0000-000000000002',
                'staff_user_id': 'promoter-17',
                'allocated_tickets': 10,
                'commission_type': 'percentage',
                'commission_value': '10',
                'actor': {'kind': 'staff', 'id': 'organizer-1'},
            }
        }
    )


class StaffAllocationUpdateRequest(BaseModel):
    allocated_tickets: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None
    commission_type: Optional[CommissionType] = None
    commission_value: Optional[Decimal] = None
    actor: Optional[ActorSchema] = None


class StaffAllocationResponse(BaseModel):
    id: UUID
    event_id: UUID
    tier_id: UUID
    staff_user_id: str
    name: Optional[str] = None
    allocated_tickets: int
    tickets_sold: int
    remaining: int
    commission_type: str
    commission_value: Decimal
    commission_earned: int
    cash_collected: int
    is_active: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, allocation: StaffAllocation) -> 'StaffAllocationResponse':
        return cls(
            id=allocation.id,
            event_id=allocation.event_id,
            tier_id=allocation.tier_id,
            staff_user_id=allocation.staff_user_id,
            name=allocation.name,
            allocated_tickets=allocation.allocated_tickets,
            tickets_sold=allocation.tickets_sold,
            remaining=allocation.remaining,
            commission_type=allocation.commission_type.value,
            commission_value=allocation.commission_value,
            commission_earned=allocation.commission_earned,
            cash_collected=allocation.cash_collected,
            is_active=allocation.is_active,
            created_at=allocation.created_at,
        )


class StaffSaleCreateRequest(BaseModel):
    quantity: int = Field(ge=1)
    payment_method: PaymentMethod = PaymentMethod.CASH
    buyer_name: Optional[str] = None
    buyer_email: Optional[str] = None
    actor: Optional[ActorSchema] = None

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'quantity': 2,
                'payment_method': 'cash',
                'buyer_name': 'Dana Lee',
                'actor': {'kind': 'staff', 'id': 'promoter-17'},
            }
        }
    )


class StaffSaleResponse(BaseModel):
    sale_id: UUID
    allocation_id: UUID
    ticket_count: int
    total_amount: int
    commission_amount: int
    cash_amount: int
    payment_method: str
    tickets: List[TicketResponse]
