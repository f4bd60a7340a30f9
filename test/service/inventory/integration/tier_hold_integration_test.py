"""
Integration tests for tier holds against a real database

Test Coverage:
1. Concurrent holds on the last units: exactly one wins, counters never oversell
2. Confirm: tickets issued once, repeated confirms return the same tickets
3. Expiry: lazy expiry on read, confirm after expiry, background sweep
4. Cancel returns the units to the pool
"""

from uuid import UUID

import anyio
import pytest

from src.platform.exception.exceptions import ConflictError
from src.service.inventory.app.command.payment_callback_use_case import PaymentOutcome
from src.service.inventory.app.dto.allocation_request import AllocationRequest
from src.service.inventory.domain.enum.inventory_status import HoldStatus, TicketStatus
from src.service.inventory.domain.inventory_errors import (
    HoldConflictError,
    HoldExpiredError,
    HoldNotActiveError,
)
from test.service.inventory.scenario import buyer, stripe_sale


class TestConcurrentTierHolds:
    @pytest.mark.integration
    async def test_last_unit_goes_to_exactly_one_buyer(
        self, given_tier, create_hold_use_case, availability_use_case, event_id: UUID
    ):
        # Given: one ticket left
        tier = await given_tier(quantity=1)
        outcomes: list[str] = []

        async def attempt(session_id: str) -> None:
            try:
                await create_hold_use_case.create_hold(
                    request=AllocationRequest(event_id=event_id, tier_id=tier.id),
                    actor=buyer(session_id),
                )
                outcomes.append('held')
            except HoldConflictError:
                outcomes.append('conflict')

        # When: five buyers race for it
        async with anyio.create_task_group() as tg:
            for i in range(5):
                tg.start_soon(attempt, f'sess_{i}')

        # Then
        assert sorted(outcomes) == ['conflict'] * 4 + ['held']
        availability = await availability_use_case.get_availability(tier_id=tier.id)
        assert availability.available == 0
        assert availability.tier.held == 1

    @pytest.mark.integration
    async def test_partial_capacity_is_not_granted(self, given_tier, hold_tier):
        tier = await given_tier(quantity=3)
        await hold_tier(tier.id, 2)

        with pytest.raises(HoldConflictError):
            await hold_tier(tier.id, 2, session_id='sess_2')

    @pytest.mark.integration
    async def test_payment_ref_is_unique_across_holds(self, given_tier, hold_tier):
        tier = await given_tier()
        await hold_tier(tier.id, payment_ref='pi_1')

        with pytest.raises(ConflictError, match='Payment reference'):
            await hold_tier(tier.id, session_id='sess_2', payment_ref='pi_1')


class TestConfirmHold:
    @pytest.mark.integration
    async def test_confirm_issues_one_ticket_per_unit(
        self, given_tier, hold_tier, confirm_hold_use_case, availability_use_case
    ):
        # Given
        tier = await given_tier(quantity=5, price=3000)
        hold = await hold_tier(tier.id, 3)

        # When
        tickets = await confirm_hold_use_case.confirm_hold(
            hold_id=hold.id, sale_context=stripe_sale('ord_42')
        )

        # Then
        assert len(tickets) == 3
        assert len({ticket.code for ticket in tickets}) == 3
        assert all(ticket.status == TicketStatus.VALID for ticket in tickets)
        assert all(ticket.price == 3000 and ticket.order_id == 'ord_42' for ticket in tickets)

        availability = await availability_use_case.get_availability(tier_id=tier.id)
        assert (availability.tier.sold, availability.tier.held) == (3, 0)
        assert availability.available == 2

    @pytest.mark.integration
    async def test_repeated_confirm_returns_same_tickets(
        self, given_tier, hold_tier, confirm_hold_use_case, availability_use_case
    ):
        tier = await given_tier()
        hold = await hold_tier(tier.id, 2)

        first = await confirm_hold_use_case.confirm_hold(hold_id=hold.id, sale_context=stripe_sale())
        second = await confirm_hold_use_case.confirm_hold(
            hold_id=hold.id, sale_context=stripe_sale()
        )

        assert {t.id for t in first} == {t.id for t in second}
        availability = await availability_use_case.get_availability(tier_id=tier.id)
        assert availability.tier.sold == 2

    @pytest.mark.integration
    async def test_concurrent_confirms_finalize_once(
        self, given_tier, hold_tier, confirm_hold_use_case, availability_use_case
    ):
        tier = await given_tier()
        hold = await hold_tier(tier.id, 2)
        results: list = []

        async def confirm() -> None:
            results.append(
                await confirm_hold_use_case.confirm_hold(
                    hold_id=hold.id, sale_context=stripe_sale()
                )
            )

        async with anyio.create_task_group() as tg:
            tg.start_soon(confirm)
            tg.start_soon(confirm)

        assert len(results) == 2
        assert {t.id for t in results[0]} == {t.id for t in results[1]}
        availability = await availability_use_case.get_availability(tier_id=tier.id)
        assert availability.tier.sold == 2

    @pytest.mark.integration
    async def test_confirm_by_payment_ref(self, given_tier, hold_tier, payment_callback_use_case):
        tier = await given_tier()
        await hold_tier(tier.id, 2, payment_ref='pi_9')

        result = await payment_callback_use_case.handle(
            payment_ref='pi_9', outcome=PaymentOutcome.SUCCEEDED, sale_context=stripe_sale()
        )

        assert len(result.tickets) == 2


class TestHoldExpiry:
    @pytest.mark.integration
    async def test_expired_hold_frees_units_without_a_sweep(
        self, given_tier, hold_tier, availability_use_case, get_hold_use_case, clock
    ):
        # Given
        tier = await given_tier(quantity=2)
        hold = await hold_tier(tier.id, 2, ttl_seconds=60)
        assert (await availability_use_case.get_availability(tier_id=tier.id)).available == 0

        # When
        clock.advance(seconds=61)

        # Then: reads already treat it as expired
        assert (await availability_use_case.get_availability(tier_id=tier.id)).available == 2
        view = await get_hold_use_case.get_hold(hold_id=hold.id)
        assert view.status == HoldStatus.EXPIRED
        # and a new hold can claim the units
        await hold_tier(tier.id, 2, session_id='sess_2')

    @pytest.mark.integration
    async def test_confirm_after_expiry_raises_and_releases(
        self, given_tier, hold_tier, confirm_hold_use_case, get_hold_use_case, clock
    ):
        tier = await given_tier()
        hold = await hold_tier(tier.id, ttl_seconds=60)
        clock.advance(minutes=5)

        with pytest.raises(HoldExpiredError):
            await confirm_hold_use_case.confirm_hold(hold_id=hold.id, sale_context=stripe_sale())

        view = await get_hold_use_case.get_hold(hold_id=hold.id)
        assert view.hold.status == HoldStatus.EXPIRED
        assert view.tickets == []
        # Still expired on retry
        with pytest.raises(HoldExpiredError):
            await confirm_hold_use_case.confirm_hold(hold_id=hold.id, sale_context=stripe_sale())

    @pytest.mark.integration
    async def test_sweep_expires_only_overdue_holds(
        self, given_tier, hold_tier, sweep_use_case, availability_use_case, clock
    ):
        # Given
        tier = await given_tier(quantity=10)
        await hold_tier(tier.id, 2, ttl_seconds=60)
        await hold_tier(tier.id, 3, session_id='sess_2', ttl_seconds=600)
        clock.advance(minutes=2)

        # When
        expired = await sweep_use_case.sweep()

        # Then
        assert expired == 1
        availability = await availability_use_case.get_availability(tier_id=tier.id)
        assert availability.tier.held == 3
        assert availability.available == 7
        assert await sweep_use_case.sweep() == 0


class TestCancelHold:
    @pytest.mark.integration
    async def test_cancel_returns_units(
        self, given_tier, hold_tier, cancel_hold_use_case, availability_use_case
    ):
        tier = await given_tier(quantity=4)
        hold = await hold_tier(tier.id, 4)

        cancelled = await cancel_hold_use_case.cancel_hold(hold_id=hold.id)

        assert cancelled.status == HoldStatus.CANCELLED
        availability = await availability_use_case.get_availability(tier_id=tier.id)
        assert (availability.available, availability.tier.held) == (4, 0)

    @pytest.mark.integration
    async def test_cancelled_hold_cannot_be_confirmed(
        self, given_tier, hold_tier, cancel_hold_use_case, confirm_hold_use_case
    ):
        tier = await given_tier()
        hold = await hold_tier(tier.id)
        await cancel_hold_use_case.cancel_hold(hold_id=hold.id)

        with pytest.raises(HoldNotActiveError):
            await confirm_hold_use_case.confirm_hold(hold_id=hold.id, sale_context=stripe_sale())

    @pytest.mark.integration
    async def test_cancel_is_idempotent(self, given_tier, hold_tier, cancel_hold_use_case):
        tier = await given_tier()
        hold = await hold_tier(tier.id)

        await cancel_hold_use_case.cancel_hold(hold_id=hold.id)
        again = await cancel_hold_use_case.cancel_hold(hold_id=hold.id)

        assert again.status == HoldStatus.CANCELLED
