from prometheus_client import Counter, Histogram


class InventoryMetrics:
    """
    Inventory engine metrics

    Label cardinality stays bounded: unit kind, actor kind and outcome only,
    never event/tier/seat ids.
    """

    def __init__(self):
        # ========== Hold Metrics ==========
        self.hold_requests = Counter(
            'inventory_hold_requests_total',
            'Hold placement attempts',
            ['actor_kind', 'result'],  # result: created/conflict/seat_unavailable/rejected
        )

        self.hold_duration = Histogram(
            'inventory_hold_duration_seconds',
            'Hold placement processing time',
            ['actor_kind'],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0],
        )

        self.holds_released = Counter(
            'inventory_holds_released_total',
            'Holds leaving ACTIVE without confirmation',
            ['reason'],  # reason: cancelled/expired
        )

        # ========== Ticket Metrics ==========
        self.tickets_issued = Counter(
            'inventory_tickets_issued_total',
            'Tickets created by finalization',
            ['unit_kind', 'payment_method'],
        )

        self.tickets_voided = Counter(
            'inventory_tickets_voided_total',
            'Tickets voided by refund',
            ['unit_kind'],
        )

        # ========== Anomalies ==========
        self.inventory_conflicts = Counter(
            'inventory_conflicts_total',
            'Finalization hit a unit it could not commit (should stay at zero)',
            ['unit_kind'],
        )

    # ========== Helper Methods ==========

    def record_hold(self, *, actor_kind: str, result: str, duration: float):
        self.hold_requests.labels(actor_kind=actor_kind, result=result).inc()
        self.hold_duration.labels(actor_kind=actor_kind).observe(duration)

    def record_hold_released(self, *, reason: str, count: int = 1):
        self.holds_released.labels(reason=reason).inc(count)

    def record_tickets_issued(self, *, unit_kind: str, payment_method: str, count: int):
        self.tickets_issued.labels(unit_kind=unit_kind, payment_method=payment_method).inc(count)

    def record_ticket_voided(self, *, unit_kind: str):
        self.tickets_voided.labels(unit_kind=unit_kind).inc()

    def record_inventory_conflict(self, *, unit_kind: str):
        self.inventory_conflicts.labels(unit_kind=unit_kind).inc()


# Global metrics instance
metrics = InventoryMetrics()
