from src.service.inventory.domain.enum.payment_method import PaymentMethod
from src.service.inventory.domain.value_object.actor import Actor
from src.service.inventory.domain.value_object.sale_context import SaleContext


def buyer(session_id: str = 'sess_1') -> Actor:
    return Actor.of(kind='buyer_session', id=session_id)


def stripe_sale(order_id: str = 'ord_1') -> SaleContext:
    return SaleContext(payment_method=PaymentMethod.STRIPE, order_id=order_id)


WAITLIST_OFFER_TTL_SECONDS = 1800
