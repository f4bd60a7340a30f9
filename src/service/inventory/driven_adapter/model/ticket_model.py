from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import DateTime, Index, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class TicketModel(Base):
    __tablename__ = 'ticket'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    code: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    event_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    hold_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    tier_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)
    seat_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    seat_label: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='valid', nullable=False)
    order_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    staff_sale_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)
    attendee_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    attendee_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    attendee_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    transferred_from_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        # At most one VALID ticket per seat
        Index(
            'uq_ticket_valid_seat',
            'seat_id',
            unique=True,
            postgresql_where=text("status = 'valid'"),
            sqlite_where=text("status = 'valid'"),
        ),
    )
