"""
Unit tests for the code that runs after inventory is released

Test Coverage:
1. WaitlistReleaseNotifierImpl: promotions per freed unit, retry after a lost race
2. SweepExpiredHoldsUseCase.run_forever: a failed round does not stop the loop
"""

from collections import Counter
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.exc import OperationalError
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import ConflictError
from src.service.inventory.app.command import sweep_expired_holds_use_case
from src.service.inventory.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)
from src.service.inventory.app.reservation_helper.hold_release_executor import ExpiryResult
from src.service.inventory.domain.inventory_errors import TierNotOnSaleError
from src.service.inventory.driven_adapter.notifier.waitlist_release_notifier_impl import (
    MAX_PROMOTION_ATTEMPTS,
    WaitlistReleaseNotifierImpl,
)


pytestmark = pytest.mark.unit

NOW = datetime(2026, 6, 1, 18, 0, tzinfo=timezone.utc)


def _mock_uow() -> AsyncMock:
    uow = AsyncMock()
    uow.__aenter__.return_value = uow
    return uow


def _offer(quantity: int = 1) -> Mock:
    offer = Mock()
    offer.entry.quantity = quantity
    return offer


class _StopLoop(Exception):
    pass


class TestWaitlistReleaseNotifier:
    def setup_method(self):
        self.uow = _mock_uow()
        self.promoter = AsyncMock()
        self.notifier = WaitlistReleaseNotifierImpl(
            uow_factory=Mock(return_value=self.uow), promoter=self.promoter, clock=lambda: NOW
        )

    async def test_each_freed_unit_is_offered(self):
        # Given: two single-ticket entries waiting, nobody after them
        self.promoter.promote_next.side_effect = [_offer(), _offer(), None]

        # When
        await self.notifier.notify_released(tier_id=uuid7(), quantity=2)

        # Then
        assert self.promoter.promote_next.await_count == 2
        assert self.uow.commit.await_count == 2

    async def test_lost_race_is_retried_with_the_same_units(self):
        # Given: a concurrent release promotes the head first
        self.promoter.promote_next.side_effect = [ConflictError('raced'), _offer()]

        # When
        await self.notifier.notify_released(tier_id=uuid7(), quantity=1)

        # Then: the next entry still gets the freed unit
        assert self.promoter.promote_next.await_count == 2
        self.uow.commit.assert_awaited_once()

    async def test_retries_are_bounded(self):
        self.promoter.promote_next.side_effect = ConflictError('raced')

        await self.notifier.notify_released(tier_id=uuid7(), quantity=1)

        assert self.promoter.promote_next.await_count == MAX_PROMOTION_ATTEMPTS
        self.uow.commit.assert_not_awaited()

    async def test_domain_error_skips_without_retry(self):
        self.promoter.promote_next.side_effect = TierNotOnSaleError()

        await self.notifier.notify_released(tier_id=uuid7(), quantity=3)

        self.promoter.promote_next.assert_awaited_once()


class TestSweepLoop:
    def setup_method(self):
        self.release_executor = AsyncMock()
        self.use_case = SweepExpiredHoldsUseCase(
            uow_factory=Mock(),
            release_executor=self.release_executor,
            release_notifier=AsyncMock(),
            clock=lambda: NOW,
        )

    async def test_database_error_does_not_stop_the_loop(self, monkeypatch):
        # Given: the first round hits a dropped connection, the second succeeds
        self.release_executor.expire_and_notify.side_effect = [
            OperationalError('SELECT hold', {}, Exception('connection refused')),
            ExpiryResult(holds_expired=1, freed=Counter()),
        ]
        sleep = AsyncMock(side_effect=[None, None, _StopLoop()])
        monkeypatch.setattr(sweep_expired_holds_use_case.anyio, 'sleep', sleep)

        # When
        with pytest.raises(_StopLoop):
            await self.use_case.run_forever(interval_seconds=5)

        # Then
        assert self.release_executor.expire_and_notify.await_count == 2
        sleep.assert_awaited_with(5)

    async def test_domain_error_does_not_stop_the_loop(self, monkeypatch):
        self.release_executor.expire_and_notify.side_effect = [
            ConflictError('counter drifted'),
            ExpiryResult(holds_expired=0, freed=Counter()),
        ]
        monkeypatch.setattr(
            sweep_expired_holds_use_case.anyio,
            'sleep',
            AsyncMock(side_effect=[None, None, _StopLoop()]),
        )

        with pytest.raises(_StopLoop):
            await self.use_case.run_forever(interval_seconds=1)

        assert self.release_executor.expire_and_notify.await_count == 2
