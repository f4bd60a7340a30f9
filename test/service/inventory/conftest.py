"""
Inventory service fixtures

Use cases are built by hand over the per-test unit of work and frozen clock,
the same object graph the DI container builds in production.
"""

from collections.abc import Awaitable, Callable
from typing import Any, List, Optional
from uuid import UUID

import pytest
from uuid_utils.compat import uuid7

from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.service.inventory.app.command.cancel_hold_use_case import CancelHoldUseCase
from src.service.inventory.app.command.claim_ticket_use_case import ClaimTicketUseCase
from src.service.inventory.app.command.confirm_hold_use_case import ConfirmHoldUseCase
from src.service.inventory.app.command.create_hold_use_case import CreateHoldUseCase
from src.service.inventory.app.command.create_staff_allocation_use_case import (
    CreateStaffAllocationUseCase,
)
from src.service.inventory.app.command.create_staff_cash_sale_use_case import (
    CreateStaffCashSaleUseCase,
)
from src.service.inventory.app.command.create_tier_use_case import CreateTierUseCase
from src.service.inventory.app.command.delete_seating_chart_use_case import (
    DeleteSeatingChartUseCase,
)
from src.service.inventory.app.command.delete_tier_use_case import DeleteTierUseCase
from src.service.inventory.app.command.import_guest_list_use_case import ImportGuestListUseCase
from src.service.inventory.app.command.join_waitlist_use_case import JoinWaitlistUseCase
from src.service.inventory.app.command.payment_callback_use_case import PaymentCallbackUseCase
from src.service.inventory.app.command.promote_waitlist_use_case import PromoteWaitlistUseCase
from src.service.inventory.app.command.register_seating_chart_use_case import (
    RegisterSeatingChartUseCase,
)
from src.service.inventory.app.command.scan_ticket_use_case import ScanTicketUseCase
from src.service.inventory.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)
from src.service.inventory.app.command.transfer_ticket_use_case import TransferTicketUseCase
from src.service.inventory.app.command.update_staff_allocation_use_case import (
    UpdateStaffAllocationUseCase,
)
from src.service.inventory.app.command.void_ticket_use_case import VoidTicketUseCase
from src.service.inventory.app.dto.allocation_request import AllocationRequest
from src.service.inventory.app.dto.seating_chart import ChartContainer, ChartSeat, ChartSection
from src.service.inventory.app.query.get_hold_use_case import GetHoldUseCase
from src.service.inventory.app.query.get_seat_status_use_case import GetSeatStatusUseCase
from src.service.inventory.app.query.get_tier_availability_use_case import (
    GetTierAvailabilityUseCase,
)
from src.service.inventory.app.query.list_section_seats_use_case import ListSectionSeatsUseCase
from src.service.inventory.app.reservation_helper.allocation_policy import AllocationPolicy
from src.service.inventory.app.reservation_helper.hold_placement_executor import (
    HoldPlacementExecutor,
)
from src.service.inventory.app.reservation_helper.hold_release_executor import (
    HoldReleaseExecutor,
)
from src.service.inventory.app.reservation_helper.ticket_finalizer import TicketFinalizer
from src.service.inventory.app.reservation_helper.waitlist_promoter import WaitlistPromoter
from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.entity.seat_entity import Seat
from src.service.inventory.domain.entity.ticket_entity import Ticket
from src.service.inventory.domain.entity.ticket_tier_entity import TicketTier
from src.service.inventory.domain.value_object.sellable_unit import SeatRef
from src.service.inventory.driven_adapter.notifier.waitlist_release_notifier_impl import (
    WaitlistReleaseNotifierImpl,
)
from test.fake_clock import FakeClock
from test.service.inventory.scenario import WAITLIST_OFFER_TTL_SECONDS, buyer, stripe_sale


# =============================================================================
# Reservation helpers
# =============================================================================


@pytest.fixture
def event_id() -> UUID:
    return uuid7()


@pytest.fixture
def release_executor() -> HoldReleaseExecutor:
    return HoldReleaseExecutor()


@pytest.fixture
def placement_executor(release_executor: HoldReleaseExecutor) -> HoldPlacementExecutor:
    return HoldPlacementExecutor(release_executor=release_executor)


@pytest.fixture
def finalizer() -> TicketFinalizer:
    return TicketFinalizer()


@pytest.fixture
def policy() -> AllocationPolicy:
    return AllocationPolicy()


@pytest.fixture
def promoter(
    policy: AllocationPolicy, placement_executor: HoldPlacementExecutor
) -> WaitlistPromoter:
    return WaitlistPromoter(
        policy=policy,
        placement_executor=placement_executor,
        offer_ttl_seconds=WAITLIST_OFFER_TTL_SECONDS,
    )


@pytest.fixture
def release_notifier(
    uow_factory: UnitOfWorkFactory, promoter: WaitlistPromoter, clock: FakeClock
) -> WaitlistReleaseNotifierImpl:
    return WaitlistReleaseNotifierImpl(uow_factory=uow_factory, promoter=promoter, clock=clock)


# =============================================================================
# Use cases
# =============================================================================


@pytest.fixture
def create_tier_use_case(uow_factory: UnitOfWorkFactory, clock: FakeClock) -> CreateTierUseCase:
    return CreateTierUseCase(uow_factory=uow_factory, clock=clock)


@pytest.fixture
def delete_tier_use_case(uow_factory: UnitOfWorkFactory) -> DeleteTierUseCase:
    return DeleteTierUseCase(uow_factory=uow_factory)


@pytest.fixture
def register_chart_use_case(uow_factory: UnitOfWorkFactory) -> RegisterSeatingChartUseCase:
    return RegisterSeatingChartUseCase(uow_factory=uow_factory)


@pytest.fixture
def delete_chart_use_case(
    uow_factory: UnitOfWorkFactory, clock: FakeClock
) -> DeleteSeatingChartUseCase:
    return DeleteSeatingChartUseCase(uow_factory=uow_factory, clock=clock)


@pytest.fixture
def create_hold_use_case(
    uow_factory: UnitOfWorkFactory,
    policy: AllocationPolicy,
    placement_executor: HoldPlacementExecutor,
    release_executor: HoldReleaseExecutor,
    release_notifier: WaitlistReleaseNotifierImpl,
    clock: FakeClock,
) -> CreateHoldUseCase:
    return CreateHoldUseCase(
        uow_factory=uow_factory,
        policy=policy,
        placement_executor=placement_executor,
        release_executor=release_executor,
        release_notifier=release_notifier,
        clock=clock,
    )


@pytest.fixture
def confirm_hold_use_case(
    uow_factory: UnitOfWorkFactory,
    finalizer: TicketFinalizer,
    release_executor: HoldReleaseExecutor,
    release_notifier: WaitlistReleaseNotifierImpl,
    clock: FakeClock,
) -> ConfirmHoldUseCase:
    return ConfirmHoldUseCase(
        uow_factory=uow_factory,
        finalizer=finalizer,
        release_executor=release_executor,
        release_notifier=release_notifier,
        clock=clock,
    )


@pytest.fixture
def cancel_hold_use_case(
    uow_factory: UnitOfWorkFactory,
    release_executor: HoldReleaseExecutor,
    release_notifier: WaitlistReleaseNotifierImpl,
    clock: FakeClock,
) -> CancelHoldUseCase:
    return CancelHoldUseCase(
        uow_factory=uow_factory,
        release_executor=release_executor,
        release_notifier=release_notifier,
        clock=clock,
    )


@pytest.fixture
def sweep_use_case(
    uow_factory: UnitOfWorkFactory,
    release_executor: HoldReleaseExecutor,
    release_notifier: WaitlistReleaseNotifierImpl,
    clock: FakeClock,
) -> SweepExpiredHoldsUseCase:
    return SweepExpiredHoldsUseCase(
        uow_factory=uow_factory,
        release_executor=release_executor,
        release_notifier=release_notifier,
        clock=clock,
    )


@pytest.fixture
def payment_callback_use_case(
    confirm_hold_use_case: ConfirmHoldUseCase, cancel_hold_use_case: CancelHoldUseCase
) -> PaymentCallbackUseCase:
    return PaymentCallbackUseCase(
        confirm_hold_use_case=confirm_hold_use_case, cancel_hold_use_case=cancel_hold_use_case
    )


@pytest.fixture
def void_ticket_use_case(
    uow_factory: UnitOfWorkFactory,
    release_notifier: WaitlistReleaseNotifierImpl,
    clock: FakeClock,
) -> VoidTicketUseCase:
    return VoidTicketUseCase(uow_factory=uow_factory, release_notifier=release_notifier, clock=clock)


@pytest.fixture
def scan_ticket_use_case(uow_factory: UnitOfWorkFactory, clock: FakeClock) -> ScanTicketUseCase:
    return ScanTicketUseCase(uow_factory=uow_factory, clock=clock)


@pytest.fixture
def transfer_ticket_use_case(
    uow_factory: UnitOfWorkFactory, clock: FakeClock
) -> TransferTicketUseCase:
    return TransferTicketUseCase(uow_factory=uow_factory, clock=clock)


@pytest.fixture
def claim_ticket_use_case(uow_factory: UnitOfWorkFactory, clock: FakeClock) -> ClaimTicketUseCase:
    return ClaimTicketUseCase(uow_factory=uow_factory, clock=clock)


@pytest.fixture
def create_allocation_use_case(
    uow_factory: UnitOfWorkFactory, clock: FakeClock
) -> CreateStaffAllocationUseCase:
    return CreateStaffAllocationUseCase(uow_factory=uow_factory, clock=clock)


@pytest.fixture
def update_allocation_use_case(
    uow_factory: UnitOfWorkFactory,
    release_notifier: WaitlistReleaseNotifierImpl,
    clock: FakeClock,
) -> UpdateStaffAllocationUseCase:
    return UpdateStaffAllocationUseCase(
        uow_factory=uow_factory, release_notifier=release_notifier, clock=clock
    )


@pytest.fixture
def staff_sale_use_case(
    uow_factory: UnitOfWorkFactory,
    policy: AllocationPolicy,
    placement_executor: HoldPlacementExecutor,
    finalizer: TicketFinalizer,
    clock: FakeClock,
) -> CreateStaffCashSaleUseCase:
    return CreateStaffCashSaleUseCase(
        uow_factory=uow_factory,
        policy=policy,
        placement_executor=placement_executor,
        finalizer=finalizer,
        clock=clock,
    )


@pytest.fixture
def guest_import_use_case(
    uow_factory: UnitOfWorkFactory,
    policy: AllocationPolicy,
    placement_executor: HoldPlacementExecutor,
    finalizer: TicketFinalizer,
    release_executor: HoldReleaseExecutor,
    release_notifier: WaitlistReleaseNotifierImpl,
    clock: FakeClock,
) -> ImportGuestListUseCase:
    return ImportGuestListUseCase(
        uow_factory=uow_factory,
        policy=policy,
        placement_executor=placement_executor,
        finalizer=finalizer,
        release_executor=release_executor,
        release_notifier=release_notifier,
        clock=clock,
    )


@pytest.fixture
def join_waitlist_use_case(
    uow_factory: UnitOfWorkFactory, clock: FakeClock
) -> JoinWaitlistUseCase:
    return JoinWaitlistUseCase(uow_factory=uow_factory, clock=clock)


@pytest.fixture
def promote_waitlist_use_case(
    uow_factory: UnitOfWorkFactory, promoter: WaitlistPromoter, clock: FakeClock
) -> PromoteWaitlistUseCase:
    return PromoteWaitlistUseCase(uow_factory=uow_factory, promoter=promoter, clock=clock)


@pytest.fixture
def availability_use_case(
    uow_factory: UnitOfWorkFactory, clock: FakeClock
) -> GetTierAvailabilityUseCase:
    return GetTierAvailabilityUseCase(uow_factory=uow_factory, clock=clock)


@pytest.fixture
def seat_status_use_case(uow_factory: UnitOfWorkFactory, clock: FakeClock) -> GetSeatStatusUseCase:
    return GetSeatStatusUseCase(uow_factory=uow_factory, clock=clock)


@pytest.fixture
def list_seats_use_case(
    uow_factory: UnitOfWorkFactory, clock: FakeClock
) -> ListSectionSeatsUseCase:
    return ListSectionSeatsUseCase(uow_factory=uow_factory, clock=clock)


@pytest.fixture
def get_hold_use_case(uow_factory: UnitOfWorkFactory, clock: FakeClock) -> GetHoldUseCase:
    return GetHoldUseCase(uow_factory=uow_factory, clock=clock)


# =============================================================================
# Scenario helpers
# =============================================================================


@pytest.fixture
def given_tier(
    create_tier_use_case: CreateTierUseCase, event_id: UUID
) -> Callable[..., Awaitable[TicketTier]]:
    async def _given_tier(
        *, name: str = 'General Admission', quantity: int = 10, price: int = 2500, **kwargs: Any
    ) -> TicketTier:
        return await create_tier_use_case.create_tier(
            event_id=event_id, name=name, price=price, quantity=quantity, **kwargs
        )

    return _given_tier


@pytest.fixture
def given_chart(
    register_chart_use_case: RegisterSeatingChartUseCase, event_id: UUID
) -> Callable[..., Awaitable[List[Seat]]]:
    """Section A, rows 1..rows with seats 1..seats_per_row at 4000 cents"""

    async def _given_chart(
        *, rows: int = 2, seats_per_row: int = 4, tier_id: Optional[UUID] = None
    ) -> List[Seat]:
        return await register_chart_use_case.register_chart(
            event_id=event_id,
            chart_id='main-floor',
            sections=[
                ChartSection(
                    section_id='A',
                    price=4000,
                    tier_id=tier_id,
                    containers=[
                        ChartContainer(
                            container_id=str(row),
                            seats=[ChartSeat(seat_id=str(seat)) for seat in range(1, seats_per_row + 1)],
                        )
                        for row in range(1, rows + 1)
                    ],
                )
            ],
        )

    return _given_chart


@pytest.fixture
def hold_tier(
    create_hold_use_case: CreateHoldUseCase, event_id: UUID
) -> Callable[..., Awaitable[Hold]]:
    async def _hold_tier(
        tier_id: UUID, quantity: int = 1, *, session_id: str = 'sess_1', **kwargs: Any
    ) -> Hold:
        return await create_hold_use_case.create_hold(
            request=AllocationRequest(event_id=event_id, tier_id=tier_id, quantity=quantity),
            actor=buyer(session_id),
            **kwargs,
        )

    return _hold_tier


@pytest.fixture
def hold_seats(
    create_hold_use_case: CreateHoldUseCase, event_id: UUID
) -> Callable[..., Awaitable[Hold]]:
    async def _hold_seats(*labels: str, session_id: str = 'sess_1', **kwargs: Any) -> Hold:
        """labels like 'A-1-2'"""
        refs = [SeatRef(*label.split('-')) for label in labels]
        return await create_hold_use_case.create_hold(
            request=AllocationRequest(event_id=event_id, seats=refs),
            actor=buyer(session_id),
            **kwargs,
        )

    return _hold_seats


@pytest.fixture
def sell_tier(
    hold_tier: Callable[..., Awaitable[Hold]], confirm_hold_use_case: ConfirmHoldUseCase
) -> Callable[..., Awaitable[List[Ticket]]]:
    async def _sell_tier(tier_id: UUID, quantity: int = 1) -> List[Ticket]:
        hold = await hold_tier(tier_id, quantity)
        return await confirm_hold_use_case.confirm_hold(hold_id=hold.id, sale_context=stripe_sale())

    return _sell_tier
