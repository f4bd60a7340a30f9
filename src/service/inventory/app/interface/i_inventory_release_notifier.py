from abc import ABC, abstractmethod
from uuid import UUID


class IInventoryReleaseNotifier(ABC):
    """Told after a commit that freed public tier inventory (cancel, expiry or void)"""

    @abstractmethod
    async def notify_released(self, *, tier_id: UUID, quantity: int) -> None:
        pass
