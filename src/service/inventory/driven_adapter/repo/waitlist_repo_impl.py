from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.clock.utc_clock import ensure_utc
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_waitlist_repo import IWaitlistRepo
from src.service.inventory.domain.entity.waitlist_entry_entity import WaitlistEntry
from src.service.inventory.domain.enum.inventory_status import WaitlistStatus
from src.service.inventory.driven_adapter.model.waitlist_entry_model import WaitlistEntryModel


class WaitlistRepoImpl(IWaitlistRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_entry: WaitlistEntryModel) -> WaitlistEntry:
        return WaitlistEntry(
            id=db_entry.id,
            event_id=db_entry.event_id,
            tier_id=db_entry.tier_id,
            actor_id=db_entry.actor_id,
            email=db_entry.email,
            name=db_entry.name,
            quantity=db_entry.quantity,
            status=WaitlistStatus(db_entry.status),
            joined_at=ensure_utc(db_entry.joined_at),  # type: ignore[arg-type]
            notified_at=ensure_utc(db_entry.notified_at),
            hold_id=db_entry.hold_id,
        )

    @Logger.io
    async def create(self, *, entry: WaitlistEntry) -> WaitlistEntry:
        self.session.add(
            WaitlistEntryModel(
                id=entry.id,
                event_id=entry.event_id,
                tier_id=entry.tier_id,
                actor_id=entry.actor_id,
                email=entry.email,
                name=entry.name,
                quantity=entry.quantity,
                status=entry.status,
                joined_at=entry.joined_at,
            )
        )
        await self.session.flush()
        return entry

    @Logger.io
    async def get_by_id(self, *, entry_id: UUID) -> Optional[WaitlistEntry]:
        result = await self.session.execute(
            select(WaitlistEntryModel)
            .where(WaitlistEntryModel.id == entry_id)
            .execution_options(populate_existing=True)
        )
        db_entry = result.scalar_one_or_none()
        return self._to_entity(db_entry) if db_entry else None

    @Logger.io
    async def get_oldest_active(self, *, tier_id: UUID) -> Optional[WaitlistEntry]:
        result = await self.session.execute(
            select(WaitlistEntryModel)
            .where(
                WaitlistEntryModel.tier_id == tier_id,
                WaitlistEntryModel.status == WaitlistStatus.ACTIVE,
            )
            .order_by(WaitlistEntryModel.joined_at, WaitlistEntryModel.id)
            .limit(1)
            .execution_options(populate_existing=True)
        )
        db_entry = result.scalar_one_or_none()
        return self._to_entity(db_entry) if db_entry else None

    @Logger.io
    async def mark_notified(self, *, entry_id: UUID, hold_id: UUID, at: datetime) -> bool:
        result = await self.session.execute(
            update(WaitlistEntryModel)
            .where(
                WaitlistEntryModel.id == entry_id,
                WaitlistEntryModel.status == WaitlistStatus.ACTIVE,
            )
            .values(status=WaitlistStatus.NOTIFIED, hold_id=hold_id, notified_at=at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @Logger.io
    async def count_active_ahead(self, *, entry: WaitlistEntry) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(WaitlistEntryModel)
            .where(
                WaitlistEntryModel.tier_id == entry.tier_id,
                WaitlistEntryModel.status == WaitlistStatus.ACTIVE,
                or_(
                    WaitlistEntryModel.joined_at < entry.joined_at,
                    and_(
                        WaitlistEntryModel.joined_at == entry.joined_at,
                        WaitlistEntryModel.id < entry.id,
                    ),
                ),
            )
        )
        return int(result.scalar_one())
