from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.service.inventory.driving_adapter.http_controller.schema.common_schema import ActorSchema


class WaitlistJoinRequest(BaseModel):
    tier_id: UUID
    quantity: int = Field(default=1, ge=1)
    email: Optional[str] = None
    name: Optional[str] = None
    actor: Optional[ActorSchema] = None


class WaitlistEntryResponse(BaseModel):
    id: UUID
    tier_id: UUID
    quantity: int
    status: str
    position: Optional[int] = None
    joined_at: datetime
    hold_id: Optional[UUID] = None


class WaitlistPromoteRequest(BaseModel):
    tier_id: UUID
    actor: Optional[ActorSchema] = None


class WaitlistPromoteResponse(BaseModel):
    promoted: bool
    entry: Optional[WaitlistEntryResponse] = None
    hold_expires_at: Optional[datetime] = None
