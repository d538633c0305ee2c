import re

# Human-readable timespans such as "1h", "30 mins" or "2.5d"; a bare number is milliseconds.
DURATION_REGEX = re.compile(
    r"^(?P<value>-?\d*\.?\d+) *"
    r"(?P<unit>milliseconds?|msecs?|ms|seconds?|secs?|s|minutes?|mins?|m"
    r"|hours?|hrs?|h|days?|d|weeks?|w|years?|yrs?|y)?$",
    re.IGNORECASE,
)

SECOND = 1.0
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
YEAR = 365.25 * DAY

UNIT_SECONDS = {
    "y": YEAR, "yr": YEAR, "yrs": YEAR, "year": YEAR, "years": YEAR,
    "w": WEEK, "week": WEEK, "weeks": WEEK,
    "d": DAY, "day": DAY, "days": DAY,
    "h": HOUR, "hr": HOUR, "hrs": HOUR, "hour": HOUR, "hours": HOUR,
    "m": MINUTE, "min": MINUTE, "mins": MINUTE, "minute": MINUTE, "minutes": MINUTE,
    "s": SECOND, "sec": SECOND, "secs": SECOND, "second": SECOND, "seconds": SECOND,
    "ms": 0.001, "msec": 0.001, "msecs": 0.001, "millisecond": 0.001, "milliseconds": 0.001,
}


def parse_duration(value: str) -> float:
    """
    Converts a timespan string into seconds.
    Raises ValueError when the string is not a recognised timespan.
    """
    text = value.strip()
    if not text or len(text) > 100:
        raise ValueError(f"Invalid duration: {value!r}")

    match = DURATION_REGEX.match(text)
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")

    unit = (match.group("unit") or "ms").lower()
    return float(match.group("value")) * UNIT_SECONDS[unit]
