from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.service.inventory.app.dto.seating_chart import ChartContainer, ChartSeat, ChartSection
from src.service.inventory.domain.enum.unit_kind import ContainerType


class TierCreateRequest(BaseModel):
    event_id: UUID
    name: str
    price: int = Field(ge=0, description='Price in cents')
    quantity: int = Field(ge=1)
    description: Optional[str] = None
    sale_start: Optional[datetime] = None
    sale_end: Optional[datetime] = None
    is_active: bool = True

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'event_id': '00000000-0000-0000-0000-000000000001',
                'name': 'General Admission',
                'price': 2500,
                'quantity': 300,
            }
        }
    )


class TierResponse(BaseModel):
    id: UUID
    event_id: UUID
    name: str
    price: int
    quantity: int
    sold: int
    held: int
    staff_reserved: int
    is_active: bool
    description: Optional[str] = None
    sale_start: Optional[datetime] = None
    sale_end: Optional[datetime] = None


class TierAvailabilityResponse(BaseModel):
    tier_id: UUID
    quantity: int
    sold: int
    available: int
    public_available: int
    staff_reserved: int


class ChartSeatSchema(BaseModel):
    seat_id: str
    seat_number: Optional[str] = None
    blocked: bool = False
    price: Optional[int] = Field(default=None, ge=0)


class ChartContainerSchema(BaseModel):
    container_id: str
    container_type: ContainerType = ContainerType.ROW
    seats: List[ChartSeatSchema]


class ChartSectionSchema(BaseModel):
    section_id: str
    price: int = Field(ge=0)
    tier_id: Optional[UUID] = None
    containers: List[ChartContainerSchema]

    def to_dto(self) -> ChartSection:
        return ChartSection(
            section_id=self.section_id,
            price=self.price,
            tier_id=self.tier_id,
            containers=[
                ChartContainer(
                    container_id=container.container_id,
                    container_type=container.container_type,
                    seats=[
                        ChartSeat(
                            seat_id=seat.seat_id,
                            seat_number=seat.seat_number,
                            blocked=seat.blocked,
                            price=seat.price,
                        )
                        for seat in container.seats
                    ],
                )
                for container in self.containers
            ],
        )


class ChartRegisterRequest(BaseModel):
    event_id: UUID
    chart_id: str
    sections: List[ChartSectionSchema]

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'event_id': '00000000-0000-0000-0000-000000000001',
                'chart_id': 'main-floor',
                'sections': [
                    {
                        'section_id': 'A',
                        'price': 4000,
                        'containers': [
                            {'container_id': '1', 'seats': [{'seat_id': '1'}, {'seat_id': '2'}]},
                            {
                                'container_id': 'T5',
                                'container_type': 'table',
                                'seats': [{'seat_id': '1'}, {'seat_id': '2', 'blocked': True}],
                            },
                        ],
                    }
                ],
            }
        }
    )


class ChartRegisterResponse(BaseModel):
    event_id: UUID
    chart_id: str
    seat_count: int


class SeatStatusResponse(BaseModel):
    event_id: UUID
    section_id: str
    row_id: str
    seat_id: str
    status: str


class SeatResponse(BaseModel):
    id: UUID
    section_id: str
    row_id: str
    seat_id: str
    seat_number: Optional[str] = None
    container_type: str
    price: int
    status: str
    tier_id: Optional[UUID] = None


class SectionSeatsResponse(BaseModel):
    event_id: UUID
    section_id: str
    total: int
    totals: Dict[str, int]
    seats: List[SeatResponse]
