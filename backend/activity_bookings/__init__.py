"""ActivityBookings backend: activities, capacity-limited bookings and mock payments."""

__version__ = "1.0.0"
