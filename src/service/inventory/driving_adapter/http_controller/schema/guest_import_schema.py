from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.service.inventory.driving_adapter.http_controller.schema.common_schema import (
    ActorSchema,
    SeatRefSchema,
)


class GuestImportRowSchema(BaseModel):
    attendee_name: str
    attendee_email: Optional[str] = None
    tier_id: Optional[UUID] = None
    quantity: int = Field(default=1, ge=1)
    seat: Optional[SeatRefSchema] = None
    section_id: Optional[str] = None


class GuestImportRequest(BaseModel):
    event_id: UUID
    rows: List[GuestImportRowSchema]
    actor: Optional[ActorSchema] = None

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'event_id': '00000000-0000-0000-0000-000000000001',
                'actor': {'kind': 'guest_import', 'id': 'vip-list-2026'},
                'rows': [
                    {'attendee_name': 'Sam Ortiz', 'tier_id': '00000000-0000-0000-0000-000000000002'},
                    {'attendee_name': 'Ari Chen', 'seat': {'section_id': 'A', 'row_id': '1', 'seat_id': '5'}},
                ],
            }
        }
    )


class GuestImportRowResponse(BaseModel):
    row_number: int
    attendee_name: str
    imported: bool
    ticket_codes: List[str] = []
    error: Optional[str] = None


class GuestImportResponse(BaseModel):
    imported: int
    failed: int
    rows: List[GuestImportRowResponse]
