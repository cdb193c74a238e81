EPSILON = 1e-3  # amounts at or below this are not worth moving
SAFETY_MARGIN = 0.10  # fraction of donor capacity kept back
MAX_ITERATIONS = 1000  # need pops per hour
SECONDS_PER_HOUR = 3600.0


def volume_to_rate(amount: float) -> float:
    """Convert an hourly volume (m³) into a flow rate (m³/s)."""
    return amount / SECONDS_PER_HOUR
