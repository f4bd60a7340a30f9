"""
Ticket Finalizer

Turns a confirmed hold into tickets, exactly once.

Flow:
1. Compare-and-set hold ACTIVE -> CONFIRMED (guarded by expires_at > now)
2. Commit every held unit as sold (tier: held -> sold, seat: HELD -> RESERVED)
3. Issue one ticket per unit, stamped with the sale context

A concurrent confirm that loses step 1 gets None back and reads the winner's
tickets. A unit that cannot be committed means accounting is broken: it is
logged at CRITICAL and the whole transaction is rolled back.
"""

from datetime import datetime
from typing import List, Optional

from opentelemetry import trace

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.service.inventory.domain.entity.hold_entity import Hold, HoldItem
from src.service.inventory.domain.entity.ticket_entity import Ticket
from src.service.inventory.domain.enum.inventory_status import HoldStatus
from src.service.inventory.domain.enum.unit_kind import UnitKind
from src.service.inventory.domain.inventory_errors import (
    InventoryConflictError,
    OversellError,
    SeatNotFoundError,
    TierNotFoundError,
)
from src.service.inventory.domain.value_object.sale_context import SaleContext


class TicketFinalizer:
    def __init__(self) -> None:
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def finalize(
        self,
        uow: AbstractUnitOfWork,
        *,
        hold: Hold,
        sale_context: SaleContext,
        now: datetime,
    ) -> Optional[List[Ticket]]:
        with self.tracer.start_as_current_span(
            'reservation_helper.finalize',
            attributes={'hold.id': str(hold.id), 'payment_method': str(sale_context.payment_method)},
        ):
            confirmed = hold.confirm(now)
            if not await uow.hold_repo.transition(
                hold_id=hold.id,
                from_status=HoldStatus.ACTIVE,
                to_status=confirmed.status,
                at=now,
                not_expired_at=now,
            ):
                return None

            tickets: List[Ticket] = []
            for item in hold.items:
                await self._commit_item(uow, hold=hold, item=item)
                tickets += await self._issue(
                    uow, hold=hold, item=item, sale_context=sale_context, now=now
                )

            await uow.ticket_repo.create_many(tickets=tickets)

        for kind in (UnitKind.TIER, UnitKind.SEAT):
            issued = sum(1 for ticket in tickets if ticket.unit_kind == kind)
            if issued:
                metrics.record_tickets_issued(
                    unit_kind=kind, payment_method=sale_context.payment_method, count=issued
                )
        Logger.base.info(f'✅ [FINALIZE] Hold {hold.id} -> {len(tickets)} tickets')
        return tickets

    async def _commit_item(self, uow: AbstractUnitOfWork, *, hold: Hold, item: HoldItem) -> None:
        try:
            await uow.inventory_store.commit_sale(unit=item.to_unit(), hold_id=hold.id)
        except OversellError as e:
            Logger.base.critical(
                f'🚨 [FINALIZE] Hold {hold.id} could not commit {item.kind} unit '
                f'{item.tier_id or item.seat_ref}: {e.message}'
            )
            metrics.record_inventory_conflict(unit_kind=item.kind)
            raise InventoryConflictError(
                f'Inventory for hold {hold.id} no longer matches its items'
            ) from e

    async def _issue(
        self,
        uow: AbstractUnitOfWork,
        *,
        hold: Hold,
        item: HoldItem,
        sale_context: SaleContext,
        now: datetime,
    ) -> List[Ticket]:
        match item.kind:
            case UnitKind.TIER:
                assert item.tier_id is not None
                tier = await uow.inventory_store.get_tier(tier_id=item.tier_id)
                if not tier:
                    raise TierNotFoundError()
                return [
                    Ticket.issue(
                        event_id=hold.event_id,
                        hold_id=hold.id,
                        tier_id=tier.id,
                        list_price=tier.price,
                        sale_context=sale_context,
                        now=now,
                    )
                    for _ in range(item.quantity)
                ]
            case UnitKind.SEAT:
                assert item.seat_id is not None
                seat = await uow.inventory_store.get_seat(seat_id=item.seat_id)
                if not seat:
                    raise SeatNotFoundError()
                return [
                    Ticket.issue(
                        event_id=hold.event_id,
                        hold_id=hold.id,
                        tier_id=seat.tier_id,
                        seat_id=seat.id,
                        seat_label=seat.label,
                        list_price=seat.price,
                        sale_context=sale_context,
                        now=now,
                    )
                ]
        return []
