"""Overlay layer holding options and the current curve for a map host.

No drawing happens here. A host (Leaflet, folium, a GIS tool) takes the
vertices from `TerminatorLayer.polygon()` or the mapping from `to_geojson()`
and styles them itself.
"""

from datetime import datetime
from typing import Any

from grayline.compute import compute_terminator, run
from grayline.models import InvalidConfiguration, TerminatorCurve, TerminatorOptions
from grayline.timeconv import Clock, TimeValue, system_clock


def _closed(curve: TerminatorCurve, half: float) -> list[tuple[float, float]]:
    # The pole facing away from the Sun is in polar night.
    pole = 90.0 if curve.sun.declination < 0 else -90.0
    return [(pole, -half), *curve.latlngs(), (pole, half)]


class TerminatorLayer:
    """Night-side polygon for one instant, recomputed on `set_time`."""

    def __init__(
        self,
        options: TerminatorOptions | None = None,
        time: TimeValue = None,
        clock: Clock = system_clock,
    ) -> None:
        self._options = options if options is not None else TerminatorOptions()
        self._clock = clock
        self._curve = run(time, self._options, clock=self._clock)

    @property
    def options(self) -> TerminatorOptions:
        return self._options

    @property
    def curve(self) -> TerminatorCurve:
        return self._curve

    @property
    def time(self) -> datetime:
        """UTC datetime of the current curve."""
        return self._curve.instant.to_datetime()

    def set_time(self, value: TimeValue = None) -> TerminatorCurve:
        """Recompute for a new time and replace the exposed curve.

        Raises:
            InvalidTimeInput: The previous curve is kept.
        """
        self._curve = run(value, self._options, clock=self._clock)
        return self._curve

    def polygon(self) -> list[tuple[float, float]]:
        """(lat, lng) vertices of the night side, closed through the dark pole."""
        return _closed(self._curve, self._options.longitude_range / 2.0)

    def to_geojson(self, unwrapped: bool = False) -> dict[str, Any]:
        """GeoJSON Feature of the night-side polygon.

        Coordinates are [lng, lat] with the ring closed. Longitudes stay within
        [-180, 180] (RFC 7946): a sweep wider than 360° is resampled over one
        turn, which the curve repeats, and the ring runs along the antimeridian.

        Args:
            unwrapped: Emit the raw sweep instead, with longitudes out to
                ±range/2.
        """
        if unwrapped or self._options.longitude_range <= 360.0:
            vertices = self.polygon()
        else:
            one_turn = TerminatorOptions(
                resolution=self._options.resolution, longitude_range=360.0
            )
            turn = compute_terminator(self._curve.instant, one_turn)
            vertices = _closed(turn, 180.0)
        ring = [[lng, lat] for lat, lng in vertices]
        ring.append(list(ring[0]))
        curve = self._curve
        return {
            "type": "Feature",
            "geometry": {"type": "Polygon", "coordinates": [ring]},
            "properties": {
                "time": self.time.isoformat(),
                "julian_day": curve.julian_day,
                "gmst": curve.gmst,
                "sun_right_ascension": curve.sun.right_ascension,
                "sun_declination": curve.sun.declination,
                "resolution": self._options.resolution,
                "longitude_range": self._options.longitude_range,
            },
        }


def terminator(
    options: TerminatorOptions | None = None,
    time: TimeValue = None,
    clock: Clock = system_clock,
    **kwargs: float,
) -> TerminatorLayer:
    """Build a TerminatorLayer.

    `resolution` and `longitude_range` keyword arguments are accepted in place
    of an explicit TerminatorOptions.

    Raises:
        InvalidConfiguration: On non-positive options or unknown keywords.
    """
    if options is None:
        unknown = set(kwargs) - {"resolution", "longitude_range"}
        if unknown:
            raise InvalidConfiguration(f"Unknown options: {', '.join(sorted(unknown))}")
        options = TerminatorOptions(**kwargs)
    elif kwargs:
        raise InvalidConfiguration("Pass either options or keyword options, not both")
    return TerminatorLayer(options=options, time=time, clock=clock)
