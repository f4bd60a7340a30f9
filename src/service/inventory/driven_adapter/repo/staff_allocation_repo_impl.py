from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.clock.utc_clock import ensure_utc
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_staff_allocation_repo import IStaffAllocationRepo
from src.service.inventory.domain.entity.staff_allocation_entity import StaffAllocation, StaffSale
from src.service.inventory.domain.enum.payment_method import CommissionType, PaymentMethod
from src.service.inventory.driven_adapter.model.staff_allocation_model import (
    StaffAllocationModel,
    StaffSaleModel,
)


class StaffAllocationRepoImpl(IStaffAllocationRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    async def _cas(self, stmt) -> bool:
        result = await self.session.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount == 1

    @staticmethod
    def _to_entity(db_alloc: StaffAllocationModel) -> StaffAllocation:
        return StaffAllocation(
            id=db_alloc.id,
            event_id=db_alloc.event_id,
            tier_id=db_alloc.tier_id,
            staff_user_id=db_alloc.staff_user_id,
            name=db_alloc.name,
            allocated_tickets=db_alloc.allocated_tickets,
            tickets_sold=db_alloc.tickets_sold,
            commission_type=CommissionType(db_alloc.commission_type),
            commission_value=Decimal(str(db_alloc.commission_value)),
            commission_earned=db_alloc.commission_earned,
            cash_collected=db_alloc.cash_collected,
            is_active=db_alloc.is_active,
            created_at=ensure_utc(db_alloc.created_at),
            updated_at=ensure_utc(db_alloc.updated_at),
        )

    @staticmethod
    def _to_sale(db_sale: StaffSaleModel) -> StaffSale:
        return StaffSale(
            id=db_sale.id,
            allocation_id=db_sale.allocation_id,
            event_id=db_sale.event_id,
            tier_id=db_sale.tier_id,
            hold_id=db_sale.hold_id,
            staff_user_id=db_sale.staff_user_id,
            ticket_count=db_sale.ticket_count,
            total_amount=db_sale.total_amount,
            commission_amount=db_sale.commission_amount,
            cash_amount=db_sale.cash_amount,
            payment_method=PaymentMethod(db_sale.payment_method),
            buyer_name=db_sale.buyer_name,
            buyer_email=db_sale.buyer_email,
            created_at=ensure_utc(db_sale.created_at),
        )

    @Logger.io
    async def create(self, *, allocation: StaffAllocation) -> StaffAllocation:
        self.session.add(
            StaffAllocationModel(
                id=allocation.id,
                event_id=allocation.event_id,
                tier_id=allocation.tier_id,
                staff_user_id=allocation.staff_user_id,
                name=allocation.name,
                allocated_tickets=allocation.allocated_tickets,
                tickets_sold=allocation.tickets_sold,
                commission_type=allocation.commission_type,
                commission_value=allocation.commission_value,
                commission_earned=allocation.commission_earned,
                cash_collected=allocation.cash_collected,
                is_active=allocation.is_active,
                created_at=allocation.created_at,
                updated_at=allocation.updated_at,
            )
        )
        await self.session.flush()
        return allocation

    @Logger.io
    async def get_by_id(self, *, allocation_id: UUID) -> Optional[StaffAllocation]:
        result = await self.session.execute(
            select(StaffAllocationModel)
            .where(StaffAllocationModel.id == allocation_id)
            .execution_options(populate_existing=True)
        )
        db_alloc = result.scalar_one_or_none()
        return self._to_entity(db_alloc) if db_alloc else None

    @Logger.io
    async def list_by_tier(self, *, tier_id: UUID) -> List[StaffAllocation]:
        result = await self.session.execute(
            select(StaffAllocationModel)
            .where(StaffAllocationModel.tier_id == tier_id)
            .order_by(StaffAllocationModel.created_at, StaffAllocationModel.id)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(db_alloc) for db_alloc in result.scalars().all()]

    @Logger.io
    async def update_if_unchanged(
        self, *, allocation: StaffAllocation, expected: StaffAllocation
    ) -> bool:
        return await self._cas(
            update(StaffAllocationModel)
            .where(
                StaffAllocationModel.id == expected.id,
                StaffAllocationModel.tickets_sold == expected.tickets_sold,
                StaffAllocationModel.allocated_tickets == expected.allocated_tickets,
                StaffAllocationModel.is_active == expected.is_active,
            )
            .values(
                allocated_tickets=allocation.allocated_tickets,
                is_active=allocation.is_active,
                commission_type=allocation.commission_type,
                commission_value=allocation.commission_value,
                updated_at=allocation.updated_at,
            )
        )

    @Logger.io
    async def consume_quota(self, *, allocation_id: UUID, quantity: int) -> bool:
        return await self._cas(
            update(StaffAllocationModel)
            .where(
                StaffAllocationModel.id == allocation_id,
                StaffAllocationModel.is_active.is_(True),
                StaffAllocationModel.tickets_sold + quantity
                <= StaffAllocationModel.allocated_tickets,
            )
            .values(tickets_sold=StaffAllocationModel.tickets_sold + quantity)
        )

    @Logger.io
    async def return_quota(self, *, allocation_id: UUID, quantity: int) -> bool:
        return await self._cas(
            update(StaffAllocationModel)
            .where(
                StaffAllocationModel.id == allocation_id,
                StaffAllocationModel.tickets_sold >= quantity,
            )
            .values(tickets_sold=StaffAllocationModel.tickets_sold - quantity)
        )

    @Logger.io
    async def add_sale_totals(
        self, *, allocation_id: UUID, commission_amount: int, cash_amount: int
    ) -> None:
        await self.session.execute(
            update(StaffAllocationModel)
            .where(StaffAllocationModel.id == allocation_id)
            .values(
                commission_earned=StaffAllocationModel.commission_earned + commission_amount,
                cash_collected=StaffAllocationModel.cash_collected + cash_amount,
            )
            .execution_options(synchronize_session=False)
        )

    @Logger.io
    async def create_sale(self, *, sale: StaffSale) -> StaffSale:
        self.session.add(
            StaffSaleModel(
                id=sale.id,
                allocation_id=sale.allocation_id,
                event_id=sale.event_id,
                tier_id=sale.tier_id,
                hold_id=sale.hold_id,
                staff_user_id=sale.staff_user_id,
                ticket_count=sale.ticket_count,
                total_amount=sale.total_amount,
                commission_amount=sale.commission_amount,
                cash_amount=sale.cash_amount,
                payment_method=sale.payment_method,
                buyer_name=sale.buyer_name,
                buyer_email=sale.buyer_email,
                created_at=sale.created_at,
            )
        )
        await self.session.flush()
        return sale

    @Logger.io
    async def get_sale(self, *, sale_id: UUID) -> Optional[StaffSale]:
        result = await self.session.execute(
            select(StaffSaleModel).where(StaffSaleModel.id == sale_id)
        )
        db_sale = result.scalar_one_or_none()
        return self._to_sale(db_sale) if db_sale else None
