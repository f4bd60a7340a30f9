from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.clock.utc_clock import ensure_utc
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_hold_repo import IHoldRepo
from src.service.inventory.domain.entity.hold_entity import Hold, HoldItem
from src.service.inventory.domain.enum.actor_kind import ActorKind
from src.service.inventory.domain.enum.inventory_status import HoldStatus
from src.service.inventory.domain.enum.unit_kind import UnitKind
from src.service.inventory.domain.value_object.actor import Actor
from src.service.inventory.domain.value_object.sellable_unit import SeatRef
from src.service.inventory.driven_adapter.model.hold_model import HoldItemModel, HoldModel


class HoldRepoImpl(IHoldRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_item(db_item: HoldItemModel) -> HoldItem:
        seat_ref = None
        if db_item.section_id is not None:
            seat_ref = SeatRef(
                section_id=db_item.section_id,
                row_id=db_item.row_id or '',
                seat_id=db_item.seat_label_id or '',
            )
        return HoldItem(
            kind=UnitKind(db_item.kind),
            tier_id=db_item.tier_id,
            quantity=db_item.quantity,
            seat_id=db_item.seat_id,
            seat_ref=seat_ref,
        )

    @classmethod
    def _to_entity(cls, db_hold: HoldModel) -> Hold:
        return Hold(
            id=db_hold.id,
            event_id=db_hold.event_id,
            actor=Actor(kind=ActorKind(db_hold.actor_kind), id=db_hold.actor_id),
            items=[cls._to_item(db_item) for db_item in db_hold.items],
            status=HoldStatus(db_hold.status),
            payment_ref=db_hold.payment_ref,
            created_at=ensure_utc(db_hold.created_at),  # type: ignore[arg-type]
            expires_at=ensure_utc(db_hold.expires_at),  # type: ignore[arg-type]
            confirmed_at=ensure_utc(db_hold.confirmed_at),
            released_at=ensure_utc(db_hold.released_at),
        )

    @Logger.io
    async def create(self, *, hold: Hold) -> Hold:
        self.session.add(
            HoldModel(
                id=hold.id,
                event_id=hold.event_id,
                actor_kind=hold.actor.kind,
                actor_id=hold.actor.id,
                status=hold.status,
                payment_ref=hold.payment_ref,
                created_at=hold.created_at,
                expires_at=hold.expires_at,
                items=[
                    HoldItemModel(
                        kind=item.kind,
                        tier_id=item.tier_id,
                        quantity=item.quantity,
                        seat_id=item.seat_id,
                        section_id=item.seat_ref.section_id if item.seat_ref else None,
                        row_id=item.seat_ref.row_id if item.seat_ref else None,
                        seat_label_id=item.seat_ref.seat_id if item.seat_ref else None,
                    )
                    for item in hold.items
                ],
            )
        )
        await self.session.flush()
        return hold

    async def _get_one(self, *where) -> Optional[Hold]:
        result = await self.session.execute(
            select(HoldModel).where(*where).execution_options(populate_existing=True)
        )
        db_hold = result.scalar_one_or_none()
        return self._to_entity(db_hold) if db_hold else None

    @Logger.io
    async def get_by_id(self, *, hold_id: UUID) -> Optional[Hold]:
        return await self._get_one(HoldModel.id == hold_id)

    @Logger.io
    async def get_by_payment_ref(self, *, payment_ref: str) -> Optional[Hold]:
        return await self._get_one(HoldModel.payment_ref == payment_ref)

    @Logger.io
    async def transition(
        self,
        *,
        hold_id: UUID,
        from_status: HoldStatus,
        to_status: HoldStatus,
        at: datetime,
        not_expired_at: Optional[datetime] = None,
    ) -> bool:
        stmt = update(HoldModel).where(HoldModel.id == hold_id, HoldModel.status == from_status)
        if not_expired_at is not None:
            stmt = stmt.where(HoldModel.expires_at > not_expired_at)

        if to_status == HoldStatus.CONFIRMED:
            stmt = stmt.values(status=to_status, confirmed_at=at)
        else:
            stmt = stmt.values(status=to_status, released_at=at)

        result = await self.session.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount == 1

    @Logger.io
    async def list_expired(
        self,
        *,
        now: datetime,
        limit: int,
        tier_ids: Optional[List[UUID]] = None,
        seat_ids: Optional[List[UUID]] = None,
    ) -> List[Hold]:
        stmt = select(HoldModel).where(
            HoldModel.status == HoldStatus.ACTIVE, HoldModel.expires_at <= now
        )
        if tier_ids is not None or seat_ids is not None:
            touching = []
            if tier_ids:
                touching.append(HoldItemModel.tier_id.in_(tier_ids))
            if seat_ids:
                touching.append(HoldItemModel.seat_id.in_(seat_ids))
            if not touching:
                return []
            stmt = stmt.where(
                HoldModel.id.in_(select(HoldItemModel.hold_id).where(or_(*touching)))
            )
        stmt = stmt.order_by(HoldModel.expires_at, HoldModel.id).limit(limit)
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        return [self._to_entity(db_hold) for db_hold in result.scalars().all()]
