"""
Integration tests for guest list import and the waitlist

Test Coverage:
1. Guest import: comp tickets per row, failed rows do not abort the batch
2. Waitlist: FIFO promotion when units come back, offer holds expire like any hold,
   a hold that lapses unswept is offered to the waitlist before the next buyer
"""

from datetime import timedelta

import pytest
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import DomainError
from src.service.inventory.app.dto.guest_import import GuestImportRow
from src.service.inventory.domain.enum.actor_kind import ActorKind
from src.service.inventory.domain.enum.inventory_status import HoldStatus, WaitlistStatus
from src.service.inventory.domain.enum.payment_method import PaymentMethod
from src.service.inventory.domain.inventory_errors import HoldConflictError
from src.service.inventory.domain.value_object.sellable_unit import SeatRef
from test.service.inventory.scenario import WAITLIST_OFFER_TTL_SECONDS


class TestGuestImport:
    @pytest.mark.integration
    async def test_partial_failure_reports_each_row(
        self,
        given_tier,
        given_chart,
        hold_seats,
        guest_import_use_case,
        availability_use_case,
        event_id,
    ):
        # Given: 2 tier units and a chart whose A-1-1 is already held
        tier = await given_tier(quantity=2, price=5000)
        await given_chart()
        await hold_seats('A-1-1')

        # When
        report = await guest_import_use_case.import_guests(
            event_id=event_id,
            import_id='import_1',
            rows=[
                GuestImportRow(attendee_name='Ada', tier_id=tier.id, attendee_email='a@example.com'),
                GuestImportRow(attendee_name='Grace', tier_id=tier.id, quantity=2),
                GuestImportRow(attendee_name='Linus', seat=SeatRef('A', '1', '1')),
                GuestImportRow(attendee_name='Barbara', seat=SeatRef('A', '1', '2')),
                GuestImportRow(attendee_name='  '),
            ],
        )

        # Then
        assert [row.imported for row in report.rows] == [True, False, False, True, False]
        assert (report.imported_count, report.failed_count) == (2, 3)
        assert [row.row_number for row in report.rows] == [1, 2, 3, 4, 5]
        assert len(report.rows[0].ticket_codes) == 1
        assert report.rows[1].error.startswith('Not enough tickets available')
        assert 'not available' in report.rows[2].error
        assert report.rows[4].error == 'Guest name is required'

        availability = await availability_use_case.get_availability(tier_id=tier.id)
        assert (availability.tier.sold, availability.tier.held) == (1, 0)

    @pytest.mark.integration
    async def test_guest_tickets_are_comps(
        self, given_tier, guest_import_use_case, scan_ticket_use_case, event_id
    ):
        tier = await given_tier(quantity=5, price=5000)

        report = await guest_import_use_case.import_guests(
            event_id=event_id,
            import_id='import_1',
            rows=[GuestImportRow(attendee_name=' Ada ', tier_id=tier.id)],
        )

        ticket = await scan_ticket_use_case.scan_ticket(code=report.rows[0].ticket_codes[0])
        assert ticket.price == 0
        assert ticket.payment_method == PaymentMethod.COMP
        assert ticket.attendee_name == 'Ada'

    @pytest.mark.integration
    async def test_guest_import_ignores_the_sale_window(
        self, given_tier, guest_import_use_case, clock, event_id
    ):
        tier = await given_tier(sale_start=clock() + timedelta(days=30))

        report = await guest_import_use_case.import_guests(
            event_id=event_id,
            import_id='import_1',
            rows=[GuestImportRow(attendee_name='Ada', tier_id=tier.id)],
        )

        assert report.imported_count == 1

    @pytest.mark.integration
    async def test_tier_of_another_event_fails_the_row(self, given_tier, guest_import_use_case):
        tier = await given_tier()

        report = await guest_import_use_case.import_guests(
            event_id=uuid7(),
            import_id='import_1',
            rows=[GuestImportRow(attendee_name='Ada', tier_id=tier.id)],
        )

        assert report.failed_count == 1
        assert report.rows[0].error == 'Ticket tier not found'

    @pytest.mark.integration
    async def test_empty_guest_list(self, guest_import_use_case, event_id):
        with pytest.raises(DomainError, match='empty'):
            await guest_import_use_case.import_guests(event_id=event_id, import_id='i', rows=[])


class TestWaitlist:
    @pytest.mark.integration
    async def test_position_reflects_join_order(self, given_tier, join_waitlist_use_case, clock):
        tier = await given_tier(quantity=1)

        _, ahead_first = await join_waitlist_use_case.join_waitlist(tier_id=tier.id, actor_id='u1')
        clock.advance(seconds=1)
        _, ahead_second = await join_waitlist_use_case.join_waitlist(tier_id=tier.id, actor_id='u2')

        assert (ahead_first, ahead_second) == (0, 1)

    @pytest.mark.integration
    async def test_cancelled_hold_is_offered_to_the_oldest_entry(
        self,
        given_tier,
        hold_tier,
        cancel_hold_use_case,
        join_waitlist_use_case,
        get_hold_use_case,
        uow_factory,
        clock,
    ):
        # Given: sold out, two people waiting
        tier = await given_tier(quantity=2)
        hold = await hold_tier(tier.id, 2)
        first, _ = await join_waitlist_use_case.join_waitlist(
            tier_id=tier.id, actor_id='u1', quantity=2
        )
        clock.advance(seconds=1)
        second, _ = await join_waitlist_use_case.join_waitlist(tier_id=tier.id, actor_id='u2')

        # When
        await cancel_hold_use_case.cancel_hold(hold_id=hold.id)

        # Then: the oldest entry gets an offer hold for its full quantity
        async with uow_factory() as uow:
            promoted = await uow.waitlist_repo.get_by_id(entry_id=first.id)
            waiting = await uow.waitlist_repo.get_by_id(entry_id=second.id)
        assert promoted.status == WaitlistStatus.NOTIFIED
        assert waiting.status == WaitlistStatus.ACTIVE

        offer = await get_hold_use_case.get_hold(hold_id=promoted.hold_id)
        assert offer.status == HoldStatus.ACTIVE
        assert offer.hold.actor.kind == ActorKind.WAITLIST
        assert offer.hold.unit_count == 2
        assert offer.hold.expires_at == clock() + timedelta(seconds=WAITLIST_OFFER_TTL_SECONDS)

    @pytest.mark.integration
    async def test_head_entry_too_large_blocks_the_queue(
        self,
        given_tier,
        sell_tier,
        void_ticket_use_case,
        join_waitlist_use_case,
        uow_factory,
        clock,
    ):
        # Given: sold out, the head entry wants 2
        tier = await given_tier(quantity=2)
        tickets = await sell_tier(tier.id, 2)
        head, _ = await join_waitlist_use_case.join_waitlist(
            tier_id=tier.id, actor_id='u1', quantity=2
        )
        clock.advance(seconds=1)
        behind, _ = await join_waitlist_use_case.join_waitlist(tier_id=tier.id, actor_id='u2')

        # When: a single unit comes back
        await void_ticket_use_case.void_ticket(ticket_id=tickets[0].id)

        # Then: nobody is skipped ahead
        async with uow_factory() as uow:
            head_now = await uow.waitlist_repo.get_by_id(entry_id=head.id)
            behind_now = await uow.waitlist_repo.get_by_id(entry_id=behind.id)
        assert head_now.status == WaitlistStatus.ACTIVE
        assert behind_now.status == WaitlistStatus.ACTIVE

    @pytest.mark.integration
    async def test_manual_promotion(
        self, given_tier, join_waitlist_use_case, promote_waitlist_use_case
    ):
        tier = await given_tier(quantity=3)
        entry, _ = await join_waitlist_use_case.join_waitlist(tier_id=tier.id, actor_id='u1')

        offer = await promote_waitlist_use_case.promote_next(tier_id=tier.id)

        assert offer is not None
        assert offer.entry.id == entry.id
        assert offer.entry.status == WaitlistStatus.NOTIFIED
        assert await promote_waitlist_use_case.promote_next(tier_id=tier.id) is None

    @pytest.mark.integration
    async def test_lapsed_hold_goes_to_the_waitlist_before_a_new_buyer(
        self, given_tier, hold_tier, join_waitlist_use_case, get_hold_use_case, uow_factory, clock
    ):
        # Given: the only unit is held and somebody is waiting for it
        tier = await given_tier(quantity=1)
        abandoned = await hold_tier(tier.id, 1, session_id='sess_a')
        entry, _ = await join_waitlist_use_case.join_waitlist(tier_id=tier.id, actor_id='u1')

        # When: the hold lapses unswept and another buyer checks out first
        clock.advance(seconds=901)
        with pytest.raises(HoldConflictError):
            await hold_tier(tier.id, 1, session_id='sess_b')

        # Then: the freed unit went to the head of the waitlist
        async with uow_factory() as uow:
            promoted = await uow.waitlist_repo.get_by_id(entry_id=entry.id)
        assert promoted.status == WaitlistStatus.NOTIFIED
        assert (await get_hold_use_case.get_hold(hold_id=abandoned.id)).status == HoldStatus.EXPIRED
        offer = await get_hold_use_case.get_hold(hold_id=promoted.hold_id)
        assert offer.status == HoldStatus.ACTIVE
        assert offer.hold.actor.kind == ActorKind.WAITLIST

    @pytest.mark.integration
    async def test_lapsed_hold_without_waitlist_is_taken_by_the_next_buyer(
        self, given_tier, hold_tier, clock
    ):
        tier = await given_tier(quantity=1)
        await hold_tier(tier.id, 1, session_id='sess_a')

        clock.advance(seconds=901)
        hold = await hold_tier(tier.id, 1, session_id='sess_b')

        assert hold.status == HoldStatus.ACTIVE
        assert hold.actor.id == 'sess_b'
