from enum import StrEnum


class PaymentMethod(StrEnum):
    STRIPE = 'stripe'
    SQUARE = 'square'
    PAYPAL = 'paypal'
    CASH = 'cash'
    CASH_APP = 'cash_app'
    COMP = 'comp'  # guest list, no money changes hands

    @property
    def is_staff_method(self) -> bool:
        return self in (PaymentMethod.CASH, PaymentMethod.CASH_APP)


class CommissionType(StrEnum):
    PERCENTAGE = 'percentage'
    FIXED = 'fixed'  # cents per ticket
