from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class TicketTierModel(Base):
    __tablename__ = 'ticket_tier'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    event_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    sold: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    held: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    staff_reserved: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    sale_start: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    sale_end: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint('quantity >= 0', name='quantity_non_negative'),
        CheckConstraint('sold >= 0', name='sold_non_negative'),
        CheckConstraint('held >= 0', name='held_non_negative'),
        CheckConstraint('staff_reserved >= 0', name='staff_reserved_non_negative'),
        CheckConstraint('sold + held + staff_reserved <= quantity', name='within_quantity'),
    )
