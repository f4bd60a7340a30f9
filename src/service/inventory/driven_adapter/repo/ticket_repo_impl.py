from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.clock.utc_clock import ensure_utc
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_ticket_repo import ITicketRepo
from src.service.inventory.domain.entity.ticket_entity import Ticket
from src.service.inventory.domain.enum.inventory_status import TicketStatus
from src.service.inventory.domain.enum.payment_method import PaymentMethod
from src.service.inventory.domain.value_object.ticket_code import normalize_ticket_code
from src.service.inventory.driven_adapter.model.ticket_model import TicketModel


class TicketRepoImpl(ITicketRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_ticket: TicketModel) -> Ticket:
        return Ticket(
            id=db_ticket.id,
            code=db_ticket.code,
            event_id=db_ticket.event_id,
            hold_id=db_ticket.hold_id,
            tier_id=db_ticket.tier_id,
            seat_id=db_ticket.seat_id,
            seat_label=db_ticket.seat_label,
            price=db_ticket.price,
            payment_method=PaymentMethod(db_ticket.payment_method),
            status=TicketStatus(db_ticket.status),
            order_id=db_ticket.order_id,
            staff_sale_id=db_ticket.staff_sale_id,
            attendee_id=db_ticket.attendee_id,
            attendee_name=db_ticket.attendee_name,
            attendee_email=db_ticket.attendee_email,
            transferred_from_id=db_ticket.transferred_from_id,
            created_at=ensure_utc(db_ticket.created_at),
            updated_at=ensure_utc(db_ticket.updated_at),
        )

    @staticmethod
    def _to_model(ticket: Ticket) -> TicketModel:
        return TicketModel(
            id=ticket.id,
            code=ticket.code,
            event_id=ticket.event_id,
            hold_id=ticket.hold_id,
            tier_id=ticket.tier_id,
            seat_id=ticket.seat_id,
            seat_label=ticket.seat_label,
            price=ticket.price,
            payment_method=ticket.payment_method,
            status=ticket.status,
            order_id=ticket.order_id,
            staff_sale_id=ticket.staff_sale_id,
            attendee_id=ticket.attendee_id,
            attendee_name=ticket.attendee_name,
            attendee_email=ticket.attendee_email,
            transferred_from_id=ticket.transferred_from_id,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
        )

    @Logger.io
    async def create_many(self, *, tickets: List[Ticket]) -> List[Ticket]:
        self.session.add_all([self._to_model(ticket) for ticket in tickets])
        await self.session.flush()
        return tickets

    async def _get_one(self, *where) -> Optional[Ticket]:
        result = await self.session.execute(
            select(TicketModel).where(*where).execution_options(populate_existing=True)
        )
        db_ticket = result.scalar_one_or_none()
        return self._to_entity(db_ticket) if db_ticket else None

    @Logger.io
    async def get_by_id(self, *, ticket_id: UUID) -> Optional[Ticket]:
        return await self._get_one(TicketModel.id == ticket_id)

    @Logger.io
    async def get_by_code(self, *, code: str) -> Optional[Ticket]:
        return await self._get_one(TicketModel.code == normalize_ticket_code(code))

    @Logger.io
    async def list_by_hold(self, *, hold_id: UUID) -> List[Ticket]:
        result = await self.session.execute(
            select(TicketModel)
            .where(TicketModel.hold_id == hold_id)
            .order_by(TicketModel.created_at, TicketModel.id)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(db_ticket) for db_ticket in result.scalars().all()]

    @Logger.io
    async def transition(self, *, ticket: Ticket, from_status: TicketStatus) -> bool:
        result = await self.session.execute(
            update(TicketModel)
            .where(TicketModel.id == ticket.id, TicketModel.status == from_status)
            .values(
                status=ticket.status,
                attendee_id=ticket.attendee_id,
                attendee_name=ticket.attendee_name,
                attendee_email=ticket.attendee_email,
                updated_at=ticket.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
