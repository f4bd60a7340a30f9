"""
Inventory Store Implementation (SQLAlchemy)

Every availability change is one conditional UPDATE; `rowcount` tells the
caller whether the precondition held at the moment the row was written.

    PostgreSQL  the row lock makes concurrent UPDATEs queue, READ COMMITTED
                re-evaluates the WHERE clause against the committed row
    sqlite      writers are serialized per database file

Either way two requests for the last unit cannot both match.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.clock.utc_clock import ensure_utc
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_inventory_store import IInventoryStore
from src.service.inventory.domain.entity.seat_entity import Seat
from src.service.inventory.domain.entity.ticket_tier_entity import TicketTier
from src.service.inventory.domain.enum.inventory_status import HoldStatus, SeatStatus
from src.service.inventory.domain.enum.unit_kind import ContainerType
from src.service.inventory.domain.inventory_errors import OversellError
from src.service.inventory.domain.value_object.sellable_unit import SeatRef, SeatUnit, TierUnit, Unit
from src.service.inventory.driven_adapter.model.hold_model import HoldItemModel, HoldModel
from src.service.inventory.driven_adapter.model.seat_model import SeatModel
from src.service.inventory.driven_adapter.model.ticket_tier_model import TicketTierModel


_PUBLIC_UNCLAIMED = (
    TicketTierModel.quantity
    - TicketTierModel.sold
    - TicketTierModel.held
    - TicketTierModel.staff_reserved
)


def _seat_free_at(now: datetime):
    """AVAILABLE, or HELD by a hold whose window has already closed"""
    return or_(
        SeatModel.status == SeatStatus.AVAILABLE,
        and_(SeatModel.status == SeatStatus.HELD, SeatModel.held_until <= now),
    )


class InventoryStoreImpl(IInventoryStore):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    async def _cas(self, stmt) -> bool:
        result = await self.session.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount == 1

    # ========== Mapping ==========

    @staticmethod
    def _to_tier(db_tier: TicketTierModel) -> TicketTier:
        return TicketTier(
            id=db_tier.id,
            event_id=db_tier.event_id,
            name=db_tier.name,
            description=db_tier.description,
            price=db_tier.price,
            quantity=db_tier.quantity,
            sold=db_tier.sold,
            held=db_tier.held,
            staff_reserved=db_tier.staff_reserved,
            sale_start=ensure_utc(db_tier.sale_start),
            sale_end=ensure_utc(db_tier.sale_end),
            is_active=db_tier.is_active,
            created_at=ensure_utc(db_tier.created_at),
            updated_at=ensure_utc(db_tier.updated_at),
        )

    @staticmethod
    def _to_seat(db_seat: SeatModel) -> Seat:
        return Seat(
            id=db_seat.id,
            event_id=db_seat.event_id,
            chart_id=db_seat.chart_id,
            section_id=db_seat.section_id,
            row_id=db_seat.row_id,
            seat_id=db_seat.seat_id,
            seat_number=db_seat.seat_number,
            container_type=ContainerType(db_seat.container_type),
            row_index=db_seat.row_index,
            seat_index=db_seat.seat_index,
            tier_id=db_seat.tier_id,
            price=db_seat.price,
            status=SeatStatus(db_seat.status),
            hold_id=db_seat.hold_id,
            held_until=ensure_utc(db_seat.held_until),
        )

    # ========== Tiers ==========

    @Logger.io
    async def create_tier(self, *, tier: TicketTier) -> TicketTier:
        self.session.add(
            TicketTierModel(
                id=tier.id,
                event_id=tier.event_id,
                name=tier.name,
                description=tier.description,
                price=tier.price,
                quantity=tier.quantity,
                sold=tier.sold,
                held=tier.held,
                staff_reserved=tier.staff_reserved,
                sale_start=tier.sale_start,
                sale_end=tier.sale_end,
                is_active=tier.is_active,
                created_at=tier.created_at,
                updated_at=tier.updated_at,
            )
        )
        await self.session.flush()
        return tier

    @Logger.io
    async def get_tier(self, *, tier_id: UUID) -> Optional[TicketTier]:
        result = await self.session.execute(
            select(TicketTierModel)
            .where(TicketTierModel.id == tier_id)
            .execution_options(populate_existing=True)
        )
        db_tier = result.scalar_one_or_none()
        return self._to_tier(db_tier) if db_tier else None

    @Logger.io
    async def delete_tier(self, *, tier_id: UUID) -> bool:
        return await self._cas(
            delete(TicketTierModel).where(
                TicketTierModel.id == tier_id,
                TicketTierModel.sold == 0,
                TicketTierModel.held == 0,
                TicketTierModel.staff_reserved == 0,
            )
        )

    async def _active_hold_quantity(self, *, tier_id: UUID, now: datetime) -> int:
        result = await self.session.execute(
            select(func.coalesce(func.sum(HoldItemModel.quantity), 0))
            .join(HoldModel, HoldModel.id == HoldItemModel.hold_id)
            .where(
                HoldItemModel.tier_id == tier_id,
                HoldModel.status == HoldStatus.ACTIVE,
                HoldModel.expires_at > now,
            )
        )
        return int(result.scalar_one())

    @Logger.io
    async def get_available_count(self, *, tier_id: UUID, now: datetime) -> int:
        tier = await self.get_tier(tier_id=tier_id)
        if tier is None:
            return 0
        held = await self._active_hold_quantity(tier_id=tier_id, now=now)
        return max(tier.quantity - tier.sold - held, 0)

    @Logger.io
    async def get_public_available_count(self, *, tier_id: UUID, now: datetime) -> int:
        tier = await self.get_tier(tier_id=tier_id)
        if tier is None:
            return 0
        held = await self._active_hold_quantity(tier_id=tier_id, now=now)
        return max(tier.quantity - tier.sold - held - tier.staff_reserved, 0)

    @Logger.io
    async def reserve_tier_units(self, *, tier_id: UUID, quantity: int) -> bool:
        return await self._cas(
            update(TicketTierModel)
            .where(TicketTierModel.id == tier_id, _PUBLIC_UNCLAIMED >= quantity)
            .values(held=TicketTierModel.held + quantity)
        )

    @Logger.io
    async def release_tier_units(self, *, tier_id: UUID, quantity: int) -> bool:
        return await self._cas(
            update(TicketTierModel)
            .where(TicketTierModel.id == tier_id, TicketTierModel.held >= quantity)
            .values(held=TicketTierModel.held - quantity)
        )

    @Logger.io
    async def carve_staff_units(self, *, tier_id: UUID, quantity: int) -> bool:
        return await self._cas(
            update(TicketTierModel)
            .where(TicketTierModel.id == tier_id, _PUBLIC_UNCLAIMED >= quantity)
            .values(staff_reserved=TicketTierModel.staff_reserved + quantity)
        )

    @Logger.io
    async def return_staff_units(self, *, tier_id: UUID, quantity: int) -> bool:
        return await self._cas(
            update(TicketTierModel)
            .where(TicketTierModel.id == tier_id, TicketTierModel.staff_reserved >= quantity)
            .values(staff_reserved=TicketTierModel.staff_reserved - quantity)
        )

    @Logger.io
    async def move_staff_units_to_hold(self, *, tier_id: UUID, quantity: int) -> bool:
        return await self._cas(
            update(TicketTierModel)
            .where(TicketTierModel.id == tier_id, TicketTierModel.staff_reserved >= quantity)
            .values(
                staff_reserved=TicketTierModel.staff_reserved - quantity,
                held=TicketTierModel.held + quantity,
            )
        )

    # ========== Seats ==========

    @Logger.io
    async def add_seats(self, *, seats: List[Seat]) -> None:
        self.session.add_all(
            [
                SeatModel(
                    id=seat.id,
                    event_id=seat.event_id,
                    chart_id=seat.chart_id,
                    section_id=seat.section_id,
                    row_id=seat.row_id,
                    seat_id=seat.seat_id,
                    seat_number=seat.seat_number,
                    container_type=seat.container_type,
                    row_index=seat.row_index,
                    seat_index=seat.seat_index,
                    tier_id=seat.tier_id,
                    price=seat.price,
                    status=seat.status,
                )
                for seat in seats
            ]
        )
        await self.session.flush()

    @Logger.io
    async def get_seat(self, *, seat_id: UUID) -> Optional[Seat]:
        result = await self.session.execute(
            select(SeatModel)
            .where(SeatModel.id == seat_id)
            .execution_options(populate_existing=True)
        )
        db_seat = result.scalar_one_or_none()
        return self._to_seat(db_seat) if db_seat else None

    @Logger.io
    async def get_seat_by_ref(self, *, event_id: UUID, seat_ref: SeatRef) -> Optional[Seat]:
        result = await self.session.execute(
            select(SeatModel)
            .where(
                SeatModel.event_id == event_id,
                SeatModel.section_id == seat_ref.section_id,
                SeatModel.row_id == seat_ref.row_id,
                SeatModel.seat_id == seat_ref.seat_id,
            )
            .execution_options(populate_existing=True)
        )
        db_seat = result.scalar_one_or_none()
        return self._to_seat(db_seat) if db_seat else None

    @Logger.io
    async def get_seat_status(
        self, *, event_id: UUID, seat_ref: SeatRef, now: datetime
    ) -> Optional[SeatStatus]:
        seat = await self.get_seat_by_ref(event_id=event_id, seat_ref=seat_ref)
        return seat.effective_status(now) if seat else None

    @Logger.io
    async def list_seats(
        self, *, event_id: UUID, section_id: str, row_id: Optional[str] = None
    ) -> List[Seat]:
        stmt = select(SeatModel).where(
            SeatModel.event_id == event_id, SeatModel.section_id == section_id
        )
        if row_id is not None:
            stmt = stmt.where(SeatModel.row_id == row_id)
        stmt = stmt.order_by(SeatModel.row_index, SeatModel.seat_index, SeatModel.seat_id)
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        return [self._to_seat(db_seat) for db_seat in result.scalars().all()]

    @Logger.io
    async def find_available_seats(
        self,
        *,
        event_id: UUID,
        section_id: str,
        quantity: int,
        now: datetime,
        row_id: Optional[str] = None,
    ) -> List[Seat]:
        stmt = select(SeatModel).where(
            SeatModel.event_id == event_id,
            SeatModel.section_id == section_id,
            _seat_free_at(now),
        )
        if row_id is not None:
            stmt = stmt.where(SeatModel.row_id == row_id)
        stmt = stmt.order_by(SeatModel.row_index, SeatModel.seat_index, SeatModel.seat_id).limit(
            quantity
        )
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        return [self._to_seat(db_seat) for db_seat in result.scalars().all()]

    @Logger.io
    async def hold_seat(
        self, *, seat_id: UUID, hold_id: UUID, held_until: datetime, now: datetime
    ) -> bool:
        return await self._cas(
            update(SeatModel)
            .where(SeatModel.id == seat_id, _seat_free_at(now))
            .values(status=SeatStatus.HELD, hold_id=hold_id, held_until=held_until)
        )

    @Logger.io
    async def release_seat(self, *, seat_id: UUID, hold_id: UUID) -> bool:
        return await self._cas(
            update(SeatModel)
            .where(
                SeatModel.id == seat_id,
                SeatModel.hold_id == hold_id,
                SeatModel.status.in_([SeatStatus.HELD, SeatStatus.RESERVED]),
            )
            .values(status=SeatStatus.AVAILABLE, hold_id=None, held_until=None)
        )

    @Logger.io
    async def count_claimed_chart_seats(
        self, *, event_id: UUID, chart_id: str, now: datetime
    ) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(SeatModel)
            .where(
                SeatModel.event_id == event_id,
                SeatModel.chart_id == chart_id,
                or_(
                    SeatModel.status == SeatStatus.RESERVED,
                    and_(SeatModel.status == SeatStatus.HELD, SeatModel.held_until > now),
                ),
            )
        )
        return int(result.scalar_one())

    @Logger.io
    async def delete_chart(self, *, event_id: UUID, chart_id: str) -> int:
        result = await self.session.execute(
            delete(SeatModel)
            .where(SeatModel.event_id == event_id, SeatModel.chart_id == chart_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    # ========== Sale ==========

    @Logger.io
    async def commit_sale(self, *, unit: Unit, hold_id: UUID) -> None:
        match unit:
            case TierUnit(tier_id=tier_id, quantity=quantity):
                committed = await self._cas(
                    update(TicketTierModel)
                    .where(
                        TicketTierModel.id == tier_id,
                        TicketTierModel.held >= quantity,
                        TicketTierModel.sold + quantity <= TicketTierModel.quantity,
                    )
                    .values(
                        sold=TicketTierModel.sold + quantity,
                        held=TicketTierModel.held - quantity,
                    )
                )
                if not committed:
                    raise OversellError(f'Tier {tier_id} cannot commit {quantity} held units')
            case SeatUnit(seat_id=seat_id, seat_ref=seat_ref):
                committed = await self._cas(
                    update(SeatModel)
                    .where(
                        SeatModel.id == seat_id,
                        SeatModel.hold_id == hold_id,
                        SeatModel.status == SeatStatus.HELD,
                    )
                    .values(status=SeatStatus.RESERVED, held_until=None)
                )
                if not committed:
                    raise OversellError(f'Seat {seat_ref} is no longer held by hold {hold_id}')

    @Logger.io
    async def revert_sale(self, *, unit: Unit, hold_id: UUID) -> bool:
        match unit:
            case TierUnit(tier_id=tier_id, quantity=quantity):
                return await self._cas(
                    update(TicketTierModel)
                    .where(TicketTierModel.id == tier_id, TicketTierModel.sold >= quantity)
                    .values(sold=TicketTierModel.sold - quantity)
                )
            case SeatUnit(seat_id=seat_id):
                return await self._cas(
                    update(SeatModel)
                    .where(
                        SeatModel.id == seat_id,
                        SeatModel.hold_id == hold_id,
                        SeatModel.status == SeatStatus.RESERVED,
                    )
                    .values(status=SeatStatus.AVAILABLE, hold_id=None, held_until=None)
                )

    @Logger.io
    async def return_sold_unit_to_staff(self, *, tier_id: UUID) -> bool:
        return await self._cas(
            update(TicketTierModel)
            .where(TicketTierModel.id == tier_id, TicketTierModel.sold >= 1)
            .values(
                sold=TicketTierModel.sold - 1,
                staff_reserved=TicketTierModel.staff_reserved + 1,
            )
        )
