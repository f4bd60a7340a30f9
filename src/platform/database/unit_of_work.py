"""
Unit of Work Pattern - one database transaction shared by every repository

Architecture:
- UoW opens a session on enter and closes it on exit
- UoW owns commit/rollback, leaving without commit rolls everything back
- Repositories receive the UoW session, so all conditional UPDATEs of one
  operation land in the same transaction (all-or-nothing holds and sales)
- Use cases receive a UoW *factory* and open one UoW per transaction
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, AsyncContextManager, Callable

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from src.service.inventory.app.interface.i_hold_repo import IHoldRepo
    from src.service.inventory.app.interface.i_inventory_store import IInventoryStore
    from src.service.inventory.app.interface.i_staff_allocation_repo import (
        IStaffAllocationRepo,
    )
    from src.service.inventory.app.interface.i_ticket_repo import ITicketRepo
    from src.service.inventory.app.interface.i_waitlist_repo import IWaitlistRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow_factory() as uow:
            ok = await uow.inventory_store.reserve_tier_units(tier_id=..., quantity=2)
            await uow.commit()
    """

    inventory_store: IInventoryStore
    hold_repo: IHoldRepo
    ticket_repo: ITicketRepo
    staff_allocation_repo: IStaffAllocationRepo
    waitlist_repo: IWaitlistRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(
        self, *, session_factory: Callable[[], AsyncContextManager[AsyncSession]]
    ) -> None:
        self.session_factory = session_factory
        self._session_cm: AsyncContextManager[AsyncSession] | None = None
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        from src.service.inventory.driven_adapter.repo.hold_repo_impl import HoldRepoImpl
        from src.service.inventory.driven_adapter.repo.inventory_store_impl import (
            InventoryStoreImpl,
        )
        from src.service.inventory.driven_adapter.repo.staff_allocation_repo_impl import (
            StaffAllocationRepoImpl,
        )
        from src.service.inventory.driven_adapter.repo.ticket_repo_impl import TicketRepoImpl
        from src.service.inventory.driven_adapter.repo.waitlist_repo_impl import WaitlistRepoImpl

        if self._session_cm is not None:
            raise RuntimeError('Unit of work is already active, create a new one per transaction')

        self._session_cm = self.session_factory()
        self.session = await self._session_cm.__aenter__()

        # Repositories share the session
        self.inventory_store = InventoryStoreImpl(session=self.session)
        self.hold_repo = HoldRepoImpl(session=self.session)
        self.ticket_repo = TicketRepoImpl(session=self.session)
        self.staff_allocation_repo = StaffAllocationRepoImpl(session=self.session)
        self.waitlist_repo = WaitlistRepoImpl(session=self.session)

        await super().__aenter__()
        return self

    async def __aexit__(self, *args) -> None:
        session_cm = self._session_cm
        try:
            await super().__aexit__(*args)
        finally:
            self._session_cm = None
            self.session = None
            if session_cm is not None:
                await session_cm.__aexit__(*args)

    async def _commit(self) -> None:
        assert self.session is not None, 'commit() outside of `async with uow`'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()


UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]
