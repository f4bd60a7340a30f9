"""Application layer data transfer objects"""

from src.service.inventory.app.dto.allocation_request import AllocationRequest
from src.service.inventory.app.dto.guest_import import GuestImportReport, GuestImportRow, GuestImportRowResult
from src.service.inventory.app.dto.seating_chart import ChartContainer, ChartSeat, ChartSection

__all__ = [
    'AllocationRequest',
    'ChartContainer',
    'ChartSeat',
    'ChartSection',
    'GuestImportReport',
    'GuestImportRow',
    'GuestImportRowResult',
]
