from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.create_staff_allocation_use_case import (
    CreateStaffAllocationUseCase,
)
from src.service.inventory.app.command.create_staff_cash_sale_use_case import (
    CreateStaffCashSaleUseCase,
)
from src.service.inventory.app.command.update_staff_allocation_use_case import (
    UpdateStaffAllocationUseCase,
)
from src.service.inventory.app.query.get_staff_allocation_use_case import (
    GetStaffAllocationUseCase,
)
from src.service.inventory.driving_adapter.http_controller.schema.common_schema import (
    TicketResponse,
    require_actor,
)
from src.service.inventory.driving_adapter.http_controller.schema.staff_schema import (
    StaffAllocationCreateRequest,
    StaffAllocationResponse,
    StaffAllocationUpdateRequest,
    StaffSaleCreateRequest,
    StaffSaleResponse,
)


router = APIRouter()


@router.post('/allocation', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_allocation(
    request: StaffAllocationCreateRequest,
    use_case: CreateStaffAllocationUseCase = Depends(CreateStaffAllocationUseCase.depends),
) -> StaffAllocationResponse:
    require_actor(request.actor)
    allocation = await use_case.create_allocation(
        tier_id=request.tier_id,
        staff_user_id=request.staff_user_id,
        allocated_tickets=request.allocated_tickets,
        commission_type=request.commission_type,
        commission_value=request.commission_value,
        name=request.name,
    )
    return StaffAllocationResponse.from_entity(allocation)


@router.get('/allocation/{allocation_id}')
@Logger.io
async def get_allocation(
    allocation_id: UUID,
    use_case: GetStaffAllocationUseCase = Depends(GetStaffAllocationUseCase.depends),
) -> StaffAllocationResponse:
    return StaffAllocationResponse.from_entity(
        await use_case.get_allocation(allocation_id=allocation_id)
    )


@router.patch('/allocation/{allocation_id}')
@Logger.io
async def update_allocation(
    allocation_id: UUID,
    request: StaffAllocationUpdateRequest,
    use_case: UpdateStaffAllocationUseCase = Depends(UpdateStaffAllocationUseCase.depends),
) -> StaffAllocationResponse:
    require_actor(request.actor)
    allocation = await use_case.update_allocation(
        allocation_id=allocation_id,
        allocated_tickets=request.allocated_tickets,
        is_active=request.is_active,
        commission_type=request.commission_type,
        commission_value=request.commission_value,
    )
    return StaffAllocationResponse.from_entity(allocation)


@router.post('/allocation/{allocation_id}/sale', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_sale(
    allocation_id: UUID,
    request: StaffSaleCreateRequest,
    use_case: CreateStaffCashSaleUseCase = Depends(CreateStaffCashSaleUseCase.depends),
) -> StaffSaleResponse:
    actor = require_actor(request.actor)
    result = await use_case.create_sale(
        allocation_id=allocation_id,
        staff_user_id=actor.id,
        quantity=request.quantity,
        payment_method=request.payment_method,
        buyer_name=request.buyer_name,
        buyer_email=request.buyer_email,
    )
    return StaffSaleResponse(
        sale_id=result.sale.id,
        allocation_id=allocation_id,
        ticket_count=result.sale.ticket_count,
        total_amount=result.sale.total_amount,
        commission_amount=result.sale.commission_amount,
        cash_amount=result.sale.cash_amount,
        payment_method=result.sale.payment_method.value,
        tickets=[TicketResponse.from_entity(ticket) for ticket in result.tickets],
    )
