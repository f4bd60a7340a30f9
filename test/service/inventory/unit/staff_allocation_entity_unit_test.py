"""
Unit tests for StaffAllocation and StaffSale

Commission is computed per sale and rounded half-up to whole cents;
only physical cash counts towards cash_collected.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import DomainError
from src.service.inventory.domain.entity.staff_allocation_entity import StaffAllocation, StaffSale
from src.service.inventory.domain.enum.payment_method import CommissionType, PaymentMethod
from src.service.inventory.domain.inventory_errors import StaffQuotaExceededError


pytestmark = pytest.mark.unit

NOW = datetime(2026, 6, 1, 18, 0, tzinfo=timezone.utc)


def _allocation(**kwargs) -> StaffAllocation:
    defaults = {
        'event_id': uuid7(),
        'tier_id': uuid7(),
        'staff_user_id': 'staff_7',
        'allocated_tickets': 10,
        'commission_type': CommissionType.PERCENTAGE,
        'commission_value': Decimal('10'),
    }
    return StaffAllocation.create(now=NOW, **(defaults | kwargs))


class TestStaffAllocationCreate:
    def test_new_allocation_reserves_its_whole_quota(self):
        allocation = _allocation()

        assert allocation.remaining == 10
        assert allocation.reserved_units == 10
        assert allocation.is_active is True

    @pytest.mark.parametrize(
        'kwargs,message',
        [
            ({'allocated_tickets': 0}, 'at least 1'),
            ({'staff_user_id': ''}, 'staff_user_id'),
            ({'commission_value': Decimal('-1')}, 'negative'),
            ({'commission_value': Decimal('100.5')}, 'exceed 100'),
        ],
    )
    def test_invalid_allocation_is_rejected(self, kwargs, message):
        with pytest.raises(DomainError, match=message):
            _allocation(**kwargs)

    def test_fixed_commission_may_exceed_one_hundred(self):
        allocation = _allocation(
            commission_type=CommissionType.FIXED, commission_value=Decimal('150')
        )

        assert allocation.commission_value == Decimal('150')


class TestStaffAllocationSelling:
    def test_quota_is_enforced(self):
        allocation = _allocation(allocated_tickets=3)
        allocation.tickets_sold = 2

        allocation.ensure_can_sell(1)
        with pytest.raises(StaffQuotaExceededError, match='1 of 3'):
            allocation.ensure_can_sell(2)

    def test_inactive_allocation_cannot_sell(self):
        allocation = _allocation()
        allocation.is_active = False

        assert allocation.reserved_units == 0
        with pytest.raises(DomainError, match='not active'):
            allocation.ensure_can_sell(1)

    def test_percentage_commission_rounds_half_up(self):
        allocation = _allocation(commission_value=Decimal('12.5'))

        # 12.5% of 1 * 2500 = 312.5
        assert allocation.commission_for(total_amount=2500, quantity=1) == 313

    def test_fixed_commission_is_per_ticket(self):
        allocation = _allocation(
            commission_type=CommissionType.FIXED, commission_value=Decimal('150')
        )

        assert allocation.commission_for(total_amount=7500, quantity=3) == 450

    def test_sale_record_totals(self):
        # Given
        allocation = _allocation()

        # When
        sale = StaffSale.record(
            allocation=allocation,
            hold_id=uuid7(),
            quantity=3,
            unit_price=2500,
            payment_method=PaymentMethod.CASH,
            now=NOW,
        )

        # Then
        assert sale.total_amount == 7500
        assert sale.commission_amount == 750
        assert sale.cash_amount == 7500
        assert sale.staff_user_id == 'staff_7'

    def test_cash_app_sale_collects_no_cash(self):
        sale = StaffSale.record(
            allocation=_allocation(),
            hold_id=uuid7(),
            quantity=1,
            unit_price=2500,
            payment_method=PaymentMethod.CASH_APP,
            now=NOW,
        )

        assert sale.cash_amount == 0
        assert sale.commission_amount == 250

    def test_card_payment_is_not_a_staff_sale(self):
        with pytest.raises(DomainError, match='cash or Cash App'):
            StaffSale.record(
                allocation=_allocation(),
                hold_id=uuid7(),
                quantity=1,
                unit_price=2500,
                payment_method=PaymentMethod.STRIPE,
                now=NOW,
            )


class TestStaffAllocationResize:
    def test_cannot_shrink_below_tickets_sold(self):
        allocation = _allocation()
        allocation.tickets_sold = 4

        with pytest.raises(DomainError, match='4 tickets already sold'):
            allocation.resize(now=NOW, allocated_tickets=3)

    def test_resize_keeps_unspecified_fields(self):
        allocation = _allocation()

        resized = allocation.resize(now=NOW, allocated_tickets=6)

        assert resized.allocated_tickets == 6
        assert resized.commission_value == Decimal('10')
        assert resized.is_active is True

    def test_deactivate_frees_the_reserved_units(self):
        allocation = _allocation()
        allocation.tickets_sold = 4

        deactivated = allocation.resize(now=NOW, is_active=False)

        assert allocation.reserved_units == 6
        assert deactivated.reserved_units == 0
