"""Inventory Domain Value Objects"""

from src.service.inventory.domain.value_object.actor import Actor
from src.service.inventory.domain.value_object.sale_context import SaleContext
from src.service.inventory.domain.value_object.sellable_unit import (
    SeatRef,
    SeatUnit,
    TierUnit,
    Unit,
)

__all__ = ['Actor', 'SaleContext', 'SeatRef', 'SeatUnit', 'TierUnit', 'Unit']
