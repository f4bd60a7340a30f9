from typing import Optional

from pydantic import BaseModel, ConfigDict

from src.service.inventory.driving_adapter.http_controller.schema.common_schema import ActorSchema


class TicketVoidRequest(BaseModel):
    actor: Optional[ActorSchema] = None
    reason: Optional[str] = None


class TicketScanRequest(BaseModel):
    code: str
    actor: Optional[ActorSchema] = None

    model_config = ConfigDict(
        json_schema_extra={
            'example': {'code': 'TKT-8KQ2M7ZP4XWA', 'actor': {'kind': 'staff', 'id': 'door-1'}}
        }
    )


class TicketTransferRequest(BaseModel):
    actor: Optional[ActorSchema] = None
    recipient_name: Optional[str] = None
    recipient_email: Optional[str] = None
    recipient_id: Optional[str] = None


class TicketClaimRequest(BaseModel):
    code: str
    actor: Optional[ActorSchema] = None
