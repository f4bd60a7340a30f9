from typing import Optional
from uuid import UUID

import attrs

from src.service.inventory.domain.enum.payment_method import PaymentMethod


@attrs.frozen
class SaleContext:
    """How a hold was paid for, stamped onto every ticket the finalizer issues"""

    payment_method: PaymentMethod
    order_id: Optional[str] = None
    staff_sale_id: Optional[UUID] = None
    attendee_id: Optional[str] = None
    attendee_name: Optional[str] = None
    attendee_email: Optional[str] = None
    unit_price_override: Optional[int] = None  # comps are issued at 0

    def price_for(self, list_price: int) -> int:
        if self.unit_price_override is not None:
            return self.unit_price_override
        return list_price
