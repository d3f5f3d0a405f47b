from prometheus_client import Counter, Histogram


class TicketLoyaltyMetrics:
    """
    Booking and loyalty business metrics

    Labels stay low-cardinality (no ticket, customer or event ids).
    """

    def __init__(self):
        # ========== Booking Metrics ==========
        self.booking_requests = Counter(
            'ticket_booking_requests_total',
            'Total booking requests',
            ['result'],  # result: success/insufficient_stock/not_found/error
        )

        self.booked_tickets = Counter(
            'ticket_booked_quantity_total',
            'Total ticket units sold through successful bookings',
        )

        self.booking_duration = Histogram(
            'ticket_booking_duration_seconds',
            'Booking transaction duration',
            buckets=[0.005, 0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0],
        )

        # ========== Payment Metrics ==========
        self.payment_confirmations = Counter(
            'ticket_payment_confirmations_total',
            'Total payment confirmations',
            ['result'],  # result: confirmed/already_paid/failed
        )

        # ========== Loyalty Metrics ==========
        self.loyalty_points = Counter(
            'loyalty_points_total',
            'Loyalty points moved',
            ['movement'],  # movement: earned/redeemed/reserved
        )

    # ========== Helper Methods ==========

    def record_booking(self, *, result: str, quantity: int = 0, duration: float | None = None):
        self.booking_requests.labels(result=result).inc()
        if quantity > 0:
            self.booked_tickets.inc(quantity)
        if duration is not None:
            self.booking_duration.observe(duration)

    def record_confirmation(self, *, result: str):
        self.payment_confirmations.labels(result=result).inc()

    def record_points(self, *, movement: str, points: int):
        if points > 0:
            self.loyalty_points.labels(movement=movement).inc(points)


# Global metrics instance
metrics = TicketLoyaltyMetrics()
