"""
Integration tests for reserved seating

Test Coverage:
1. Chart registration and seat map reads
2. Explicit seat picks and best-available in a section
3. Concurrent picks of the same seat
4. Seat lifecycle: AVAILABLE -> HELD -> AVAILABLE (cancel / expiry) and HELD -> RESERVED
5. Chart deletion guarded by claimed seats
"""

from uuid import UUID

import anyio
import pytest

from src.platform.exception.exceptions import DomainError, NotFoundError
from src.service.inventory.app.dto.allocation_request import AllocationRequest
from src.service.inventory.app.dto.seating_chart import ChartContainer, ChartSeat, ChartSection
from src.service.inventory.domain.enum.inventory_status import SeatStatus
from src.service.inventory.domain.inventory_errors import (
    InventoryInUseError,
    SeatNotFoundError,
    SeatUnavailableError,
)
from src.service.inventory.domain.value_object.sellable_unit import SeatRef
from test.service.inventory.scenario import buyer, stripe_sale


def _ref(label: str) -> SeatRef:
    return SeatRef(*label.split('-'))


class TestSeatingChart:
    @pytest.mark.integration
    async def test_register_chart_lists_seats_in_layout_order(
        self, given_chart, list_seats_use_case, event_id: UUID
    ):
        # Given
        seats = await given_chart(rows=2, seats_per_row=3)

        # When
        section = await list_seats_use_case.list_seats(event_id=event_id, section_id='A')

        # Then
        assert len(seats) == 6
        assert [view.seat.label for view in section.seats] == [
            'A-1-1', 'A-1-2', 'A-1-3', 'A-2-1', 'A-2-2', 'A-2-3',
        ]
        assert section.totals['available'] == 6
        assert all(view.seat.price == 4000 for view in section.seats)

    @pytest.mark.integration
    async def test_blocked_seats_and_price_overrides(
        self, register_chart_use_case, seat_status_use_case, event_id: UUID
    ):
        await register_chart_use_case.register_chart(
            event_id=event_id,
            chart_id='tables',
            sections=[
                ChartSection(
                    section_id='T',
                    price=9000,
                    containers=[
                        ChartContainer(
                            container_id='7',
                            seats=[
                                ChartSeat(seat_id='1', price=12000),
                                ChartSeat(seat_id='2', blocked=True),
                            ],
                        )
                    ],
                )
            ],
        )

        assert (
            await seat_status_use_case.get_seat_status(event_id=event_id, seat_ref=_ref('T-7-2'))
            == SeatStatus.BLOCKED
        )

    @pytest.mark.integration
    async def test_duplicate_seat_in_chart_is_rejected(self, register_chart_use_case, event_id):
        section = ChartSection(
            section_id='A',
            price=1000,
            containers=[ChartContainer(container_id='1', seats=[ChartSeat('1'), ChartSeat('1')])],
        )

        with pytest.raises(DomainError, match='Duplicate seat A-1-1'):
            await register_chart_use_case.register_chart(
                event_id=event_id, chart_id='dup', sections=[section]
            )

    @pytest.mark.integration
    async def test_unknown_seat(self, given_chart, seat_status_use_case, hold_seats, event_id):
        await given_chart()

        with pytest.raises(SeatNotFoundError):
            await seat_status_use_case.get_seat_status(
                event_id=event_id, seat_ref=SeatRef('Z', '9', '9')
            )
        with pytest.raises(SeatNotFoundError):
            await hold_seats('A-9-9')


class TestSeatHolds:
    @pytest.mark.integration
    async def test_held_seat_cannot_be_held_again(
        self, given_chart, hold_seats, seat_status_use_case, event_id
    ):
        # Given
        await given_chart()
        await hold_seats('A-1-1', 'A-1-2')

        # When / Then
        assert (
            await seat_status_use_case.get_seat_status(event_id=event_id, seat_ref=_ref('A-1-1'))
            == SeatStatus.HELD
        )
        with pytest.raises(SeatUnavailableError):
            await hold_seats('A-1-2', 'A-1-3', session_id='sess_2')

        # all-or-nothing: A-1-3 was not left behind
        assert (
            await seat_status_use_case.get_seat_status(event_id=event_id, seat_ref=_ref('A-1-3'))
            == SeatStatus.AVAILABLE
        )

    @pytest.mark.integration
    async def test_concurrent_picks_of_one_seat(self, given_chart, hold_seats):
        await given_chart()
        outcomes: list[str] = []

        async def attempt(session_id: str) -> None:
            try:
                await hold_seats('A-2-2', session_id=session_id)
                outcomes.append('held')
            except SeatUnavailableError:
                outcomes.append('unavailable')

        async with anyio.create_task_group() as tg:
            for i in range(4):
                tg.start_soon(attempt, f'sess_{i}')

        assert sorted(outcomes) == ['held'] + ['unavailable'] * 3

    @pytest.mark.integration
    async def test_cancel_then_hold_again(
        self, given_chart, hold_seats, cancel_hold_use_case, seat_status_use_case, event_id
    ):
        await given_chart()
        hold = await hold_seats('A-1-4')

        await cancel_hold_use_case.cancel_hold(hold_id=hold.id)

        assert (
            await seat_status_use_case.get_seat_status(event_id=event_id, seat_ref=_ref('A-1-4'))
            == SeatStatus.AVAILABLE
        )
        await hold_seats('A-1-4', session_id='sess_2')

    @pytest.mark.integration
    async def test_expired_seat_hold_reads_available_and_is_reclaimable(
        self, given_chart, hold_seats, seat_status_use_case, clock, event_id
    ):
        await given_chart()
        await hold_seats('A-1-1', ttl_seconds=120)

        clock.advance(minutes=3)

        assert (
            await seat_status_use_case.get_seat_status(event_id=event_id, seat_ref=_ref('A-1-1'))
            == SeatStatus.AVAILABLE
        )
        await hold_seats('A-1-1', session_id='sess_2')

    @pytest.mark.integration
    async def test_best_available_takes_seats_in_layout_order(
        self, given_chart, hold_seats, create_hold_use_case, event_id
    ):
        # Given: the first seat is already taken
        await given_chart(rows=2, seats_per_row=4)
        await hold_seats('A-1-1')

        # When
        hold = await create_hold_use_case.create_hold(
            request=AllocationRequest(event_id=event_id, section_id='A', quantity=3),
            actor=buyer('sess_2'),
        )

        # Then
        assert sorted(str(item.seat_ref) for item in hold.seat_items) == ['A-1-2', 'A-1-3', 'A-1-4']

    @pytest.mark.integration
    async def test_best_available_in_a_full_row(
        self, given_chart, hold_seats, create_hold_use_case, event_id
    ):
        await given_chart(rows=1, seats_per_row=2)
        await hold_seats('A-1-1')

        with pytest.raises(SeatUnavailableError, match='Only 1 seats'):
            await create_hold_use_case.create_hold(
                request=AllocationRequest(event_id=event_id, section_id='A', row_id='1', quantity=2),
                actor=buyer('sess_2'),
            )

    @pytest.mark.integration
    async def test_confirm_reserves_seats_and_issues_labelled_tickets(
        self, given_chart, hold_seats, confirm_hold_use_case, list_seats_use_case, event_id
    ):
        await given_chart()
        hold = await hold_seats('A-2-1', 'A-2-2')

        tickets = await confirm_hold_use_case.confirm_hold(hold_id=hold.id, sale_context=stripe_sale())

        assert sorted(ticket.seat_label for ticket in tickets) == ['A-2-1', 'A-2-2']
        assert all(ticket.price == 4000 for ticket in tickets)
        section = await list_seats_use_case.list_seats(event_id=event_id, section_id='A', row_id='2')
        assert section.totals['reserved'] == 2
        assert section.totals['available'] == 2


class TestDeleteChart:
    @pytest.mark.integration
    async def test_chart_with_held_seats_cannot_be_deleted(
        self, given_chart, hold_seats, delete_chart_use_case, event_id
    ):
        await given_chart()
        await hold_seats('A-1-1')

        with pytest.raises(InventoryInUseError, match='1 held or reserved'):
            await delete_chart_use_case.delete_chart(event_id=event_id, chart_id='main-floor')

    @pytest.mark.integration
    async def test_delete_untouched_chart(
        self, given_chart, delete_chart_use_case, list_seats_use_case, event_id
    ):
        await given_chart(rows=2, seats_per_row=4)

        deleted = await delete_chart_use_case.delete_chart(event_id=event_id, chart_id='main-floor')

        assert deleted == 8
        with pytest.raises(NotFoundError):
            await list_seats_use_case.list_seats(event_id=event_id, section_id='A')
