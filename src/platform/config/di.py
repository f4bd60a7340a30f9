"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.clock.utc_clock import utc_now
from src.platform.config.core_setting import Settings, settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.inventory.app.reservation_helper.allocation_policy import AllocationPolicy
from src.service.inventory.app.reservation_helper.hold_placement_executor import (
    HoldPlacementExecutor,
)
from src.service.inventory.app.reservation_helper.hold_release_executor import (
    HoldReleaseExecutor,
)
from src.service.inventory.app.reservation_helper.ticket_finalizer import TicketFinalizer
from src.service.inventory.app.reservation_helper.waitlist_promoter import WaitlistPromoter
from src.service.inventory.driven_adapter.notifier.waitlist_release_notifier_impl import (
    WaitlistReleaseNotifierImpl,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (engine + session maker, overridden with a sqlite file in tests)
    database = providers.Singleton(Database)

    # One UoW per transaction: use cases receive `unit_of_work.provider`
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.session
    )

    # Time source (frozen in tests)
    clock = providers.Object(utc_now)

    # Reservation helpers (stateless)
    release_executor = providers.Singleton(HoldReleaseExecutor)
    placement_executor = providers.Singleton(
        HoldPlacementExecutor, release_executor=release_executor
    )
    ticket_finalizer = providers.Singleton(TicketFinalizer)
    allocation_policy = providers.Singleton(AllocationPolicy)

    waitlist_promoter = providers.Singleton(
        WaitlistPromoter,
        policy=allocation_policy,
        placement_executor=placement_executor,
        offer_ttl_seconds=settings.WAITLIST_OFFER_TTL_SECONDS,
    )
    release_notifier = providers.Singleton(
        WaitlistReleaseNotifierImpl,
        uow_factory=unit_of_work.provider,
        promoter=waitlist_promoter,
        clock=clock,
    )


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
