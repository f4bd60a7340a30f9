"""
Payment Callback Use Case

Gateway webhook, matched to a hold by its payment reference:
- succeeded -> confirm (idempotent, a retried webhook gets the same tickets)
- failed    -> cancel (idempotent, units go back to inventory)
"""

from enum import StrEnum
from typing import List, Optional, Self

import attrs
from fastapi import Depends

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.cancel_hold_use_case import CancelHoldUseCase
from src.service.inventory.app.command.confirm_hold_use_case import ConfirmHoldUseCase
from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.entity.ticket_entity import Ticket
from src.service.inventory.domain.value_object.sale_context import SaleContext


class PaymentOutcome(StrEnum):
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'


@attrs.frozen
class PaymentCallbackResult:
    hold: Optional[Hold] = None
    tickets: List[Ticket] = attrs.field(factory=list)


class PaymentCallbackUseCase:
    def __init__(
        self, *, confirm_hold_use_case: ConfirmHoldUseCase, cancel_hold_use_case: CancelHoldUseCase
    ) -> None:
        self.confirm_hold_use_case = confirm_hold_use_case
        self.cancel_hold_use_case = cancel_hold_use_case

    @classmethod
    def depends(
        cls,
        confirm_hold_use_case: ConfirmHoldUseCase = Depends(ConfirmHoldUseCase.depends),
        cancel_hold_use_case: CancelHoldUseCase = Depends(CancelHoldUseCase.depends),
    ) -> Self:
        return cls(
            confirm_hold_use_case=confirm_hold_use_case,
            cancel_hold_use_case=cancel_hold_use_case,
        )

    @Logger.io
    async def handle(
        self, *, payment_ref: str, outcome: PaymentOutcome, sale_context: SaleContext
    ) -> PaymentCallbackResult:
        match outcome:
            case PaymentOutcome.SUCCEEDED:
                tickets = await self.confirm_hold_use_case.confirm_hold_by_payment_ref(
                    payment_ref=payment_ref, sale_context=sale_context
                )
                Logger.base.info(f'💳 [PAYMENT] {payment_ref} succeeded, {len(tickets)} tickets')
                return PaymentCallbackResult(tickets=tickets)
            case PaymentOutcome.FAILED:
                hold = await self.cancel_hold_use_case.cancel_hold_by_payment_ref(
                    payment_ref=payment_ref
                )
                Logger.base.info(f'💳 [PAYMENT] {payment_ref} failed, hold {hold.id} {hold.status}')
                return PaymentCallbackResult(hold=hold)
