"""init_inventory_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17

Schema:
- ticket_tier: Fungible tier inventory with sold/held/staff_reserved counters
- seat: Reserved-seating inventory, one row per (event, section, row, seat)
- hold / hold_item: Time-bounded claims and the units they cover
- ticket: Issued tickets, at most one VALID ticket per seat
- staff_allocation / staff_sale: Staff cash-sale quotas and their sales
- waitlist_entry: FIFO waitlist per tier
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables with final schema."""

    # ========== Inventory ==========

    op.create_table(
        'ticket_tier',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('event_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('sold', sa.Integer(), nullable=False),
        sa.Column('held', sa.Integer(), nullable=False),
        sa.Column('staff_reserved', sa.Integer(), nullable=False),
        sa.Column('sale_start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('sale_end', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('quantity >= 0', name=op.f('ck_ticket_tier_quantity_non_negative')),
        sa.CheckConstraint('sold >= 0', name=op.f('ck_ticket_tier_sold_non_negative')),
        sa.CheckConstraint('held >= 0', name=op.f('ck_ticket_tier_held_non_negative')),
        sa.CheckConstraint(
            'staff_reserved >= 0', name=op.f('ck_ticket_tier_staff_reserved_non_negative')
        ),
        sa.CheckConstraint(
            'sold + held + staff_reserved <= quantity',
            name=op.f('ck_ticket_tier_within_quantity'),
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_ticket_tier')),
    )
    op.create_index(op.f('ix_ticket_tier_event_id'), 'ticket_tier', ['event_id'])

    op.create_table(
        'seat',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('event_id', sa.Uuid(), nullable=False),
        sa.Column('chart_id', sa.String(length=64), nullable=False),
        sa.Column('section_id', sa.String(length=64), nullable=False),
        sa.Column('row_id', sa.String(length=64), nullable=False),
        sa.Column('seat_id', sa.String(length=64), nullable=False),
        sa.Column('seat_number', sa.String(length=32), nullable=True),
        sa.Column('container_type', sa.String(length=10), nullable=False),
        sa.Column('row_index', sa.Integer(), nullable=False),
        sa.Column('seat_index', sa.Integer(), nullable=False),
        sa.Column('tier_id', sa.Uuid(), nullable=True),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('hold_id', sa.Uuid(), nullable=True),
        sa.Column('held_until', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_seat')),
        sa.UniqueConstraint('event_id', 'section_id', 'row_id', 'seat_id', name='uq_seat_ref'),
    )
    op.create_index(op.f('ix_seat_hold_id'), 'seat', ['hold_id'])
    op.create_index(
        'ix_seat_section_order', 'seat', ['event_id', 'section_id', 'row_index', 'seat_index']
    )
    op.create_index('ix_seat_chart', 'seat', ['event_id', 'chart_id'])

    # ========== Holds ==========

    op.create_table(
        'hold',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('event_id', sa.Uuid(), nullable=False),
        sa.Column('actor_kind', sa.String(length=20), nullable=False),
        sa.Column('actor_id', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('payment_ref', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('confirmed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('released_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_hold')),
        sa.UniqueConstraint('payment_ref', name=op.f('uq_hold_payment_ref')),
    )
    op.create_index(op.f('ix_hold_event_id'), 'hold', ['event_id'])
    op.create_index('ix_hold_status_expires', 'hold', ['status', 'expires_at'])

    op.create_table(
        'hold_item',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('hold_id', sa.Uuid(), nullable=False),
        sa.Column('kind', sa.String(length=10), nullable=False),
        sa.Column('tier_id', sa.Uuid(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('seat_id', sa.Uuid(), nullable=True),
        sa.Column('section_id', sa.String(length=64), nullable=True),
        sa.Column('row_id', sa.String(length=64), nullable=True),
        sa.Column('seat_label_id', sa.String(length=64), nullable=True),
        sa.ForeignKeyConstraint(
            ['hold_id'],
            ['hold.id'],
            name=op.f('fk_hold_item_hold_id_hold'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_hold_item')),
    )
    op.create_index(op.f('ix_hold_item_hold_id'), 'hold_item', ['hold_id'])
    op.create_index(op.f('ix_hold_item_tier_id'), 'hold_item', ['tier_id'])
    op.create_index(op.f('ix_hold_item_seat_id'), 'hold_item', ['seat_id'])

    # ========== Tickets ==========

    op.create_table(
        'ticket',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(length=32), nullable=False),
        sa.Column('event_id', sa.Uuid(), nullable=False),
        sa.Column('hold_id', sa.Uuid(), nullable=False),
        sa.Column('tier_id', sa.Uuid(), nullable=True),
        sa.Column('seat_id', sa.Uuid(), nullable=True),
        sa.Column('seat_label', sa.String(length=200), nullable=True),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('order_id', sa.String(length=255), nullable=True),
        sa.Column('staff_sale_id', sa.Uuid(), nullable=True),
        sa.Column('attendee_id', sa.String(length=255), nullable=True),
        sa.Column('attendee_name', sa.String(length=255), nullable=True),
        sa.Column('attendee_email', sa.String(length=255), nullable=True),
        sa.Column('transferred_from_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_ticket')),
        sa.UniqueConstraint('code', name=op.f('uq_ticket_code')),
    )
    op.create_index(op.f('ix_ticket_event_id'), 'ticket', ['event_id'])
    op.create_index(op.f('ix_ticket_hold_id'), 'ticket', ['hold_id'])
    op.create_index(op.f('ix_ticket_tier_id'), 'ticket', ['tier_id'])
    op.create_index(op.f('ix_ticket_order_id'), 'ticket', ['order_id'])
    op.create_index(op.f('ix_ticket_staff_sale_id'), 'ticket', ['staff_sale_id'])
    op.create_index(op.f('ix_ticket_attendee_id'), 'ticket', ['attendee_id'])
    # At most one VALID ticket per seat
    op.create_index(
        'uq_ticket_valid_seat',
        'ticket',
        ['seat_id'],
        unique=True,
        postgresql_where=sa.text("status = 'valid'"),
        sqlite_where=sa.text("status = 'valid'"),
    )

    # ========== Staff sales ==========

    op.create_table(
        'staff_allocation',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('event_id', sa.Uuid(), nullable=False),
        sa.Column('tier_id', sa.Uuid(), nullable=False),
        sa.Column('staff_user_id', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('allocated_tickets', sa.Integer(), nullable=False),
        sa.Column('tickets_sold', sa.Integer(), nullable=False),
        sa.Column('commission_type', sa.String(length=20), nullable=False),
        sa.Column('commission_value', sa.Numeric(10, 2), nullable=False),
        sa.Column('commission_earned', sa.Integer(), nullable=False),
        sa.Column('cash_collected', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            'tickets_sold >= 0', name=op.f('ck_staff_allocation_tickets_sold_non_negative')
        ),
        sa.CheckConstraint(
            'tickets_sold <= allocated_tickets',
            name=op.f('ck_staff_allocation_within_allocation'),
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_staff_allocation')),
    )
    op.create_index(op.f('ix_staff_allocation_event_id'), 'staff_allocation', ['event_id'])
    op.create_index(op.f('ix_staff_allocation_tier_id'), 'staff_allocation', ['tier_id'])
    op.create_index(
        op.f('ix_staff_allocation_staff_user_id'), 'staff_allocation', ['staff_user_id']
    )

    op.create_table(
        'staff_sale',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('allocation_id', sa.Uuid(), nullable=False),
        sa.Column('event_id', sa.Uuid(), nullable=False),
        sa.Column('tier_id', sa.Uuid(), nullable=False),
        sa.Column('hold_id', sa.Uuid(), nullable=False),
        sa.Column('staff_user_id', sa.String(length=255), nullable=False),
        sa.Column('ticket_count', sa.Integer(), nullable=False),
        sa.Column('total_amount', sa.Integer(), nullable=False),
        sa.Column('commission_amount', sa.Integer(), nullable=False),
        sa.Column('cash_amount', sa.Integer(), nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False),
        sa.Column('buyer_name', sa.String(length=255), nullable=True),
        sa.Column('buyer_email', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_staff_sale')),
    )
    op.create_index(op.f('ix_staff_sale_allocation_id'), 'staff_sale', ['allocation_id'])
    op.create_index(op.f('ix_staff_sale_event_id'), 'staff_sale', ['event_id'])

    # ========== Waitlist ==========

    op.create_table(
        'waitlist_entry',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('event_id', sa.Uuid(), nullable=False),
        sa.Column('tier_id', sa.Uuid(), nullable=False),
        sa.Column('actor_id', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('notified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('hold_id', sa.Uuid(), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_waitlist_entry')),
    )
    op.create_index(op.f('ix_waitlist_entry_event_id'), 'waitlist_entry', ['event_id'])
    op.create_index(
        'ix_waitlist_fifo', 'waitlist_entry', ['tier_id', 'status', 'joined_at', 'id']
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('waitlist_entry')
    op.drop_table('staff_sale')
    op.drop_table('staff_allocation')
    op.drop_index('uq_ticket_valid_seat', table_name='ticket')
    op.drop_table('ticket')
    op.drop_table('hold_item')
    op.drop_table('hold')
    op.drop_table('seat')
    op.drop_table('ticket_tier')
