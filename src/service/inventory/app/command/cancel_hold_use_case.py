from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.utc_clock import Clock
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.confirm_hold_use_case import load_hold
from src.service.inventory.app.interface.i_inventory_release_notifier import (
    IInventoryReleaseNotifier,
)
from src.service.inventory.app.reservation_helper.hold_release_executor import (
    HoldReleaseExecutor,
    notify_freed,
)
from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.enum.inventory_status import HoldStatus


class CancelHoldUseCase:
    """
    ACTIVE -> CANCELLED and release. Cancelling an already released hold
    returns it unchanged; a CONFIRMED hold is refunded per ticket instead.
    """

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        release_executor: HoldReleaseExecutor,
        release_notifier: IInventoryReleaseNotifier,
        clock: Clock,
    ) -> None:
        self.uow_factory = uow_factory
        self.release_executor = release_executor
        self.release_notifier = release_notifier
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        release_executor: HoldReleaseExecutor = Depends(Provide[Container.release_executor]),
        release_notifier: IInventoryReleaseNotifier = Depends(
            Provide[Container.release_notifier]
        ),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            release_executor=release_executor,
            release_notifier=release_notifier,
            clock=clock,
        )

    @Logger.io
    async def cancel_hold(self, *, hold_id: UUID) -> Hold:
        return await self._cancel(hold_id=hold_id)

    @Logger.io
    async def cancel_hold_by_payment_ref(self, *, payment_ref: str) -> Hold:
        return await self._cancel(payment_ref=payment_ref)

    async def _cancel(
        self, *, hold_id: Optional[UUID] = None, payment_ref: Optional[str] = None
    ) -> Hold:
        now = self.clock()
        async with self.uow_factory() as uow:
            hold = await load_hold(uow, hold_id=hold_id, payment_ref=payment_ref)
            if hold.status == HoldStatus.CONFIRMED:
                raise DomainError('Hold is already confirmed, void its tickets instead', 400)
            if hold.status.is_released:
                return hold

            freed = await self.release_executor.release(
                uow, hold=hold, reason=HoldStatus.CANCELLED, now=now
            )
            await uow.commit()

        if freed is None:
            # Lost to a concurrent release or confirm
            async with self.uow_factory() as uow:
                current = await load_hold(uow, hold_id=hold.id)
            if current.status == HoldStatus.CONFIRMED:
                raise DomainError('Hold is already confirmed, void its tickets instead', 400)
            return current

        await notify_freed(self.release_notifier, freed)
        return hold.release(reason=HoldStatus.CANCELLED, now=now)
