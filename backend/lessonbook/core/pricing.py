"""Lesson Pricing — effective teacher rate and duration-scaled prices."""

MINUTES_PER_HOUR: int = 60


def effective_rate(custom_rate: float | None, default_rate: float) -> float:
    """A teacher's custom rate when set, otherwise the platform default."""
    if custom_rate is not None:
        return round(float(custom_rate), 2)
    return round(float(default_rate), 2)


def price_for_duration(duration: int, hourly_rate: float) -> float:
    # Used for generated history; live bookings charge the flat effective rate.
    return round(duration / MINUTES_PER_HOUR * hourly_rate, 2)
