"""Low-precision solar ephemeris and ecliptic → equatorial transform.

Formulas follow the Astronomical Almanac's low-precision Sun (about 0.01°
between 1950 and 2050), which is plenty for a map overlay.
"""

import math

from grayline.models import SunEclipticPosition, SunEquatorialPosition
from grayline.timeconv import J2000


def normalize_degrees(angle: float) -> float:
    """Wrap an angle into [0, 360)."""
    angle %= 360.0
    # -1e-14 % 360.0 == 360.0
    return 0.0 if angle >= 360.0 else angle


def sun_ecliptic_position(julian_day: float) -> SunEclipticPosition:
    """Sun's ecliptic longitude (degrees, [0, 360)) and distance (AU)."""
    n = julian_day - J2000
    mean_longitude = (280.460 + 0.9856474 * n) % 360.0
    mean_anomaly = math.radians((357.528 + 0.9856003 * n) % 360.0)

    longitude = normalize_degrees(
        mean_longitude
        + 1.915 * math.sin(mean_anomaly)
        + 0.020 * math.sin(2 * mean_anomaly)
    )
    distance = (
        1.00014
        - 0.01671 * math.cos(mean_anomaly)
        - 0.00014 * math.cos(2 * mean_anomaly)
    )
    return SunEclipticPosition(longitude=longitude, distance=distance)


def ecliptic_obliquity(julian_day: float) -> float:
    """Obliquity of the ecliptic in degrees, linear in Julian centuries since J2000.0."""
    centuries = (julian_day - J2000) / 36525.0
    return 23.43929111 - (46.836769 / 3600.0) * centuries


def sun_equatorial_position(
    ecliptic_longitude: float, obliquity: float
) -> SunEquatorialPosition:
    """Convert the Sun's ecliptic longitude to right ascension / declination.

    The Sun's ecliptic latitude is taken as zero.

    Args:
        ecliptic_longitude: Ecliptic longitude (degrees).
        obliquity: Obliquity of the ecliptic (degrees).

    Returns:
        SunEquatorialPosition with right ascension in [0, 360) and declination
        in [-90, 90], both in degrees.
    """
    lam = math.radians(ecliptic_longitude)
    eps = math.radians(obliquity)

    alpha = math.atan2(math.cos(eps) * math.sin(lam), math.cos(lam))
    delta = math.asin(math.sin(eps) * math.sin(lam))

    return SunEquatorialPosition(
        right_ascension=normalize_degrees(math.degrees(alpha)),
        declination=math.degrees(delta),
    )
