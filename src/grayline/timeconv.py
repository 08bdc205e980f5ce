"""Time conversion layer: time input normalization, Julian Day and sidereal time."""

import logging
import math
import numbers
from collections.abc import Callable
from datetime import date, datetime, timedelta

from pytz import utc

from grayline.models import UNIX_EPOCH, Instant

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
TimeValue = Instant | datetime | date | str | int | float | None

J2000 = 2451545.0  # Julian Day of 2000-01-01T12:00:00 TT
UNIX_EPOCH_JD = 2440587.5  # Julian Day of 1970-01-01T00:00:00Z
MS_PER_DAY = 86400000.0

_MS = timedelta(milliseconds=1)


class InvalidTimeInput(ValueError):
    """Time value that cannot be normalized to an Instant."""


def system_clock() -> datetime:
    """Default clock: the current UTC time."""
    return datetime.now(utc)


def _from_datetime(dt: datetime) -> Instant:
    if dt.tzinfo is None:
        dt = utc.localize(dt)
    try:
        dt = dt.astimezone(utc)
    except OverflowError as exc:
        raise InvalidTimeInput(f"Time out of range: {dt.isoformat()}") from exc
    return Instant(epoch_ms=(dt - UNIX_EPOCH) / _MS)


def _from_string(text: str) -> Instant:
    stripped = text.strip()
    try:
        parsed = datetime.fromisoformat(stripped)
    except ValueError as exc:
        raise InvalidTimeInput(f"Unparseable time string: {text!r}") from exc
    return _from_datetime(parsed)


def _from_epoch_ms(value: float) -> Instant:
    try:
        epoch_ms = float(value)
    except OverflowError as exc:
        raise InvalidTimeInput("Epoch milliseconds too large to represent") from exc
    if not math.isfinite(epoch_ms):
        raise InvalidTimeInput(f"Epoch milliseconds must be finite, got {value!r}")
    instant = Instant(epoch_ms=epoch_ms)
    try:
        instant.to_datetime()
    except OverflowError as exc:
        raise InvalidTimeInput(f"Epoch milliseconds out of range: {value!r}") from exc
    return instant


def parse_instant(value: TimeValue = None, clock: Clock = system_clock) -> Instant:
    """Normalize a caller-supplied time value to an Instant.

    Args:
        value: An Instant, a datetime (naive values are taken as UTC), a date
            (midnight UTC), an ISO 8601 string, or milliseconds since the Unix
            epoch. None means "now" as reported by `clock`.
        clock: Zero-argument callable returning the current datetime.

    Returns:
        Instant for the supplied value.

    Raises:
        InvalidTimeInput: When the value has an unsupported type, cannot be
            parsed, or falls outside the representable calendar range.
    """
    if value is None:
        now = clock()
        logger.debug("No time supplied, using clock value %s", now)
        return _from_datetime(now)
    if isinstance(value, Instant):
        return value
    if isinstance(value, datetime):
        return _from_datetime(value)
    if isinstance(value, date):
        return _from_datetime(datetime(value.year, value.month, value.day))
    if isinstance(value, str):
        return _from_string(value)
    # bool is an int subclass; True is not a time.
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return _from_epoch_ms(value)
    raise InvalidTimeInput(f"Unsupported time value: {value!r}")


def julian_day_from_epoch_ms(epoch_ms: float) -> float:
    """Julian Day for a plain milliseconds-since-epoch number."""
    return epoch_ms / MS_PER_DAY + UNIX_EPOCH_JD


def to_julian_day(instant: Instant) -> float:
    """Julian Day of an instant from its UTC calendar fields.

    The day number at 0h UTC comes from the Gregorian calendar algorithm
    (Meeus, Astronomical Algorithms ch. 7); the elapsed fraction of the day is
    added on top, so the integer part rolls over at noon UTC.
    """
    dt = instant.to_datetime()
    year, month = dt.year, dt.month
    if month <= 2:
        year -= 1
        month += 12
    century = year // 100
    gregorian = 2 - century + century // 4
    jd0 = (
        math.floor(365.25 * (year + 4716))
        + math.floor(30.6001 * (month + 1))
        + dt.day
        + gregorian
        - 1524.5
    )
    seconds = dt.hour * 3600 + dt.minute * 60 + dt.second + dt.microsecond / 1e6
    return jd0 + seconds / 86400.0


def to_gmst(julian_day: float) -> float:
    """Greenwich Mean Sidereal Time in hours, [0, 24).

    IAU 1982 expression referenced to J2000.0.
    """
    days = julian_day - J2000
    centuries = days / 36525.0
    gmst = 18.697374558 + 24.06570982441908 * days + 0.000026 * centuries**2
    gmst %= 24.0
    # Tiny negative inputs round up to exactly 24.0.
    return 0.0 if gmst >= 24.0 else gmst
