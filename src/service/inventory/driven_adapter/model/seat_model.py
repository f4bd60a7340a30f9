from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import DateTime, Index, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class SeatModel(Base):
    __tablename__ = 'seat'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    event_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    chart_id: Mapped[str] = mapped_column(String(64), nullable=False)
    section_id: Mapped[str] = mapped_column(String(64), nullable=False)
    row_id: Mapped[str] = mapped_column(String(64), nullable=False)
    seat_id: Mapped[str] = mapped_column(String(64), nullable=False)
    seat_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    container_type: Mapped[str] = mapped_column(String(10), default='row', nullable=False)
    row_index: Mapped[int] = mapped_column(Integer, nullable=False)
    seat_index: Mapped[int] = mapped_column(Integer, nullable=False)
    tier_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='available', nullable=False)
    hold_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)
    held_until: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint('event_id', 'section_id', 'row_id', 'seat_id', name='uq_seat_ref'),
        Index('ix_seat_section_order', 'event_id', 'section_id', 'row_index', 'seat_index'),
        Index('ix_seat_chart', 'event_id', 'chart_id'),
    )
