"""Terminator computation layer: hour angle, terminator latitude and the longitude sweep."""

import logging
import math

import numpy as np
from numpy.typing import ArrayLike

from grayline.ephemeris import (
    ecliptic_obliquity,
    sun_ecliptic_position,
    sun_equatorial_position,
)
from grayline.models import (
    Instant,
    SunEquatorialPosition,
    TerminatorCurve,
    TerminatorOptions,
    TerminatorPoint,
)
from grayline.timeconv import (
    Clock,
    TimeValue,
    parse_instant,
    system_clock,
    to_gmst,
    to_julian_day,
)

logger = logging.getLogger(__name__)


def hour_angle(
    longitude: ArrayLike, sun: SunEquatorialPosition, gmst_hours: float
) -> np.ndarray:
    """Local hour angle of the Sun (degrees) at the given longitude(s).

    Local sidereal time (GMST in degrees plus east longitude) minus the Sun's
    right ascension. Not wrapped; only its cosine is used downstream.
    """
    return gmst_hours * 15.0 + np.asarray(longitude, dtype=float) - sun.right_ascension


def latitude_at(angle: ArrayLike, sun: SunEquatorialPosition) -> np.ndarray:
    """Latitude (degrees) where the Sun is on the horizon for the given hour angle(s).

    Solves sin φ sin δ + cos φ cos δ cos H = 0, i.e.
    tan φ = -cos H cos δ / sin δ. Both atan2 arguments are multiplied by the
    sign of δ so the denominator stays non-negative and the result stays in
    [-90, 90]. At δ = 0 the terminator is the dawn/dusk meridian circle and the
    result is ±90 (0 where cos H is exactly zero).
    """
    dec = math.radians(sun.declination)
    sign = 1.0 if sun.declination >= 0 else -1.0
    ha = np.radians(np.asarray(angle, dtype=float))
    lat = np.arctan2(-sign * np.cos(ha) * math.cos(dec), sign * math.sin(dec))
    return np.degrees(lat)


def sweep_longitudes(options: TerminatorOptions) -> np.ndarray:
    """Sampled longitudes from -range/2 to +range/2, `resolution` points per degree.

    The last sample is pinned to +range/2 when range * resolution is not integral.
    """
    half = options.longitude_range / 2.0
    steps = np.arange(options.sample_count, dtype=float)
    longitudes = -half + steps / options.resolution
    longitudes[-1] = half
    return longitudes


def compute_terminator(
    instant: Instant, options: TerminatorOptions | None = None
) -> TerminatorCurve:
    """Compute the day/night terminator for an instant.

    Args:
        instant: Normalized time of the computation.
        options: Sampling configuration. Defaults to 720° at 2 points/degree,
            two full wraps so the polygon closes cleanly across the antimeridian.

    Returns:
        TerminatorCurve with `options.sample_count` points ordered by longitude.
    """
    if options is None:
        options = TerminatorOptions()

    julian_day = to_julian_day(instant)
    gmst = to_gmst(julian_day)
    ecliptic = sun_ecliptic_position(julian_day)
    obliquity = ecliptic_obliquity(julian_day)
    sun = sun_equatorial_position(ecliptic.longitude, obliquity)
    logger.debug(
        "jd=%.6f gmst=%.6fh lambda=%.4f R=%.5fAU ra=%.4f dec=%.4f",
        julian_day,
        gmst,
        ecliptic.longitude,
        ecliptic.distance,
        sun.right_ascension,
        sun.declination,
    )

    longitudes = sweep_longitudes(options)
    latitudes = latitude_at(hour_angle(longitudes, sun, gmst), sun)

    points = tuple(
        TerminatorPoint(latitude=lat, longitude=lng)
        for lat, lng in zip(latitudes.tolist(), longitudes.tolist())
    )
    logger.debug("Computed %d terminator points", len(points))

    return TerminatorCurve(
        instant=instant,
        julian_day=julian_day,
        gmst=gmst,
        sun=sun,
        points=points,
    )


def run(
    time: TimeValue = None,
    options: TerminatorOptions | None = None,
    clock: Clock = system_clock,
) -> TerminatorCurve:
    """Top-level entry point: takes a time value and returns a TerminatorCurve.

    Args:
        time: Datetime, date, time string, epoch milliseconds or Instant.
            None means the current time according to `clock`.
        options: Sampling configuration.
        clock: Source of "now" when `time` is None.

    Returns:
        Fully computed TerminatorCurve.

    Raises:
        InvalidTimeInput: When `time` cannot be normalized.
    """
    instant = parse_instant(time, clock=clock)
    return compute_terminator(instant, options)
