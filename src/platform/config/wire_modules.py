"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.inventory.app.command import (
    cancel_hold_use_case,
    claim_ticket_use_case,
    confirm_hold_use_case,
    create_hold_use_case,
    create_staff_allocation_use_case,
    create_staff_cash_sale_use_case,
    create_tier_use_case,
    delete_seating_chart_use_case,
    delete_tier_use_case,
    import_guest_list_use_case,
    join_waitlist_use_case,
    payment_callback_use_case,
    promote_waitlist_use_case,
    register_seating_chart_use_case,
    scan_ticket_use_case,
    sweep_expired_holds_use_case,
    transfer_ticket_use_case,
    update_staff_allocation_use_case,
    void_ticket_use_case,
)
from src.service.inventory.app.query import (
    get_hold_use_case,
    get_seat_status_use_case,
    get_staff_allocation_use_case,
    get_tier_availability_use_case,
    list_section_seats_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    # Inventory setup
    create_tier_use_case,
    delete_tier_use_case,
    register_seating_chart_use_case,
    delete_seating_chart_use_case,
    # Holds
    create_hold_use_case,
    confirm_hold_use_case,
    cancel_hold_use_case,
    sweep_expired_holds_use_case,
    payment_callback_use_case,
    # Tickets
    void_ticket_use_case,
    scan_ticket_use_case,
    transfer_ticket_use_case,
    claim_ticket_use_case,
    # Staff, guest list, waitlist
    create_staff_allocation_use_case,
    update_staff_allocation_use_case,
    create_staff_cash_sale_use_case,
    import_guest_list_use_case,
    join_waitlist_use_case,
    promote_waitlist_use_case,
    # Queries
    get_tier_availability_use_case,
    get_seat_status_use_case,
    list_section_seats_use_case,
    get_hold_use_case,
    get_staff_allocation_use_case,
]
