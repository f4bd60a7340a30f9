"""
Import Guest List Use Case

Comps tickets for a list of guests. Each row is its own transaction: a row
that cannot be seated is reported and the import carries on.
"""

from typing import List, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import CustomBaseError, DomainError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.dto.allocation_request import AllocationRequest
from src.service.inventory.app.dto.guest_import import (
    GuestImportReport,
    GuestImportRow,
    GuestImportRowResult,
)
from src.service.inventory.app.interface.i_inventory_release_notifier import (
    IInventoryReleaseNotifier,
)
from src.service.inventory.app.reservation_helper.allocation_policy import AllocationPolicy
from src.service.inventory.app.reservation_helper.hold_placement_executor import (
    LAZY_EXPIRY_BATCH,
    HoldPlacementExecutor,
)
from src.service.inventory.app.reservation_helper.hold_release_executor import (
    HoldReleaseExecutor,
)
from src.service.inventory.app.reservation_helper.ticket_finalizer import TicketFinalizer
from src.service.inventory.domain.entity.ticket_entity import Ticket
from src.service.inventory.domain.enum.actor_kind import ActorKind
from src.service.inventory.domain.enum.payment_method import PaymentMethod
from src.service.inventory.domain.inventory_errors import (
    InventoryConflictError,
    TierNotFoundError,
)
from src.service.inventory.domain.value_object.actor import Actor
from src.service.inventory.domain.value_object.sale_context import SaleContext


GUEST_IMPORT_HOLD_TTL_SECONDS = 60


class ImportGuestListUseCase:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        policy: AllocationPolicy,
        placement_executor: HoldPlacementExecutor,
        finalizer: TicketFinalizer,
        release_executor: HoldReleaseExecutor,
        release_notifier: IInventoryReleaseNotifier,
        clock: Clock,
    ) -> None:
        self.uow_factory = uow_factory
        self.policy = policy
        self.placement_executor = placement_executor
        self.finalizer = finalizer
        self.release_executor = release_executor
        self.release_notifier = release_notifier
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        policy: AllocationPolicy = Depends(Provide[Container.allocation_policy]),
        placement_executor: HoldPlacementExecutor = Depends(
            Provide[Container.placement_executor]
        ),
        finalizer: TicketFinalizer = Depends(Provide[Container.ticket_finalizer]),
        release_executor: HoldReleaseExecutor = Depends(Provide[Container.release_executor]),
        release_notifier: IInventoryReleaseNotifier = Depends(
            Provide[Container.release_notifier]
        ),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            policy=policy,
            placement_executor=placement_executor,
            finalizer=finalizer,
            release_executor=release_executor,
            release_notifier=release_notifier,
            clock=clock,
        )

    @Logger.io
    async def import_guests(
        self, *, event_id: UUID, import_id: str, rows: List[GuestImportRow]
    ) -> GuestImportReport:
        if not rows:
            raise DomainError('Guest list is empty', 400)

        actor = Actor.of(kind=ActorKind.GUEST_IMPORT, id=import_id)
        results: List[GuestImportRowResult] = []
        with self.tracer.start_as_current_span(
            'use_case.import_guest_list', attributes={'event.id': str(event_id), 'rows': len(rows)}
        ):
            for row_number, row in enumerate(rows, start=1):
                try:
                    tickets = await self._import_row(event_id=event_id, actor=actor, row=row)
                except CustomBaseError as e:
                    Logger.base.warning(f'⚠️ [GUEST-IMPORT] Row {row_number} skipped: {e.message}')
                    results.append(
                        GuestImportRowResult(
                            row_number=row_number,
                            attendee_name=row.attendee_name,
                            imported=False,
                            error=e.message,
                        )
                    )
                    continue
                results.append(
                    GuestImportRowResult(
                        row_number=row_number,
                        attendee_name=row.attendee_name,
                        imported=True,
                        ticket_codes=[ticket.code for ticket in tickets],
                    )
                )

        report = GuestImportReport(rows=results)
        Logger.base.info(
            f'📋 [GUEST-IMPORT] {import_id}: {report.imported_count} imported, '
            f'{report.failed_count} failed'
        )
        return report

    async def _import_row(
        self, *, event_id: UUID, actor: Actor, row: GuestImportRow
    ) -> List[Ticket]:
        if not row.attendee_name or not row.attendee_name.strip():
            raise DomainError('Guest name is required', 400)

        request = AllocationRequest(
            event_id=event_id,
            quantity=row.quantity,
            tier_id=row.tier_id,
            seats=[row.seat] if row.seat else [],
            section_id=row.section_id,
        )
        now = self.clock()
        if row.tier_id:
            await self.release_executor.expire_and_notify(
                uow_factory=self.uow_factory,
                notifier=self.release_notifier,
                now=now,
                limit=LAZY_EXPIRY_BATCH,
                tier_ids=[row.tier_id],
            )

        async with self.uow_factory() as uow:
            if row.tier_id:
                tier = await uow.inventory_store.get_tier(tier_id=row.tier_id)
                if not tier or tier.event_id != event_id:
                    raise TierNotFoundError()

            units = await self.policy.resolve(uow, request=request, now=now)
            hold = await self.placement_executor.place(
                uow,
                event_id=event_id,
                actor=actor,
                units=units,
                ttl_seconds=GUEST_IMPORT_HOLD_TTL_SECONDS,
                now=now,
            )
            tickets = await self.finalizer.finalize(
                uow,
                hold=hold,
                sale_context=SaleContext(
                    payment_method=PaymentMethod.COMP,
                    attendee_name=row.attendee_name.strip(),
                    attendee_email=row.attendee_email,
                    unit_price_override=0,
                ),
                now=now,
            )
            if tickets is None:
                raise InventoryConflictError(f'Guest hold {hold.id} changed before finalize')
            await uow.commit()
        return tickets
