from datetime import datetime
from typing import List, Optional
import uuid

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base


class HoldModel(Base):
    __tablename__ = 'hold'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    event_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    actor_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    actor_id: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='active', nullable=False)
    payment_ref: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    confirmed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    released_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    items: Mapped[List['HoldItemModel']] = relationship(
        back_populates='hold',
        lazy='selectin',
        cascade='all, delete-orphan',
        order_by='HoldItemModel.id',
    )

    __table_args__ = (Index('ix_hold_status_expires', 'status', 'expires_at'),)


class HoldItemModel(Base):
    __tablename__ = 'hold_item'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hold_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey('hold.id', ondelete='CASCADE'), nullable=False, index=True
    )
    kind: Mapped[str] = mapped_column(String(10), nullable=False)
    tier_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    seat_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)
    section_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    row_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    seat_label_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    hold: Mapped[HoldModel] = relationship(back_populates='items')
