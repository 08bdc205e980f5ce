"""Data model definitions — explicit boundaries between input, compute, and overlay layers."""

import math
import numbers
from dataclasses import dataclass
from datetime import datetime, timedelta
from collections.abc import Iterator

from pytz import utc

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=utc)


class InvalidConfiguration(ValueError):
    """Non-positive or non-numeric terminator option."""


@dataclass(frozen=True)
class Instant:
    """A point in time, normalized to milliseconds since the Unix epoch (UTC)."""

    epoch_ms: float  # Milliseconds since 1970-01-01T00:00:00Z

    def to_datetime(self) -> datetime:
        """Return the instant as a UTC-aware datetime."""
        return UNIX_EPOCH + timedelta(milliseconds=self.epoch_ms)


@dataclass(frozen=True)
class SunEclipticPosition:
    """Sun's apparent position in the ecliptic frame."""

    longitude: float  # Ecliptic longitude (degrees, [0, 360))
    distance: float  # Earth–Sun distance (astronomical units)


@dataclass(frozen=True)
class SunEquatorialPosition:
    """Sun's position projected onto the equatorial frame."""

    right_ascension: float  # Right ascension (degrees, [0, 360))
    declination: float  # Declination (degrees, [-90, 90])


@dataclass(frozen=True)
class TerminatorPoint:
    """One vertex of the day/night boundary."""

    latitude: float  # Decimal degrees, [-90, 90]
    longitude: float  # Decimal degrees, unwrapped sweep value

    def as_pair(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class TerminatorOptions:
    """Sampling configuration for the longitude sweep. Validated on construction."""

    resolution: float = 2.0  # Points per degree of longitude
    longitude_range: float = 720.0  # Total sweep width (degrees), centred on 0

    def __post_init__(self) -> None:
        for name in ("resolution", "longitude_range"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidConfiguration(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise InvalidConfiguration(f"{name} must be positive, got {value!r}")

    @property
    def sample_count(self) -> int:
        """Number of points in a curve built with these options."""
        return max(1, round(self.longitude_range * self.resolution)) + 1


@dataclass(frozen=True)
class TerminatorCurve:
    """The sole output of the compute layer. Fully computed state for one instant."""

    instant: Instant
    julian_day: float
    gmst: float  # Greenwich Mean Sidereal Time (hours, [0, 24))
    sun: SunEquatorialPosition
    points: tuple[TerminatorPoint, ...]  # Strictly increasing longitude

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[TerminatorPoint]:
        return iter(self.points)

    def latlngs(self) -> list[tuple[float, float]]:
        """(latitude, longitude) pairs, ready to be used as polygon vertices."""
        return [p.as_pair() for p in self.points]
