"""Environment configuration.

Read after `load_dotenv()` has populated `os.environ`:

    GRAYLINE_RESOLUTION       points per degree of longitude (default 2)
    GRAYLINE_LONGITUDE_RANGE  sweep width in degrees (default 720)
    GRAYLINE_TIME             time string or epoch milliseconds (default: now)
"""

import os
import re
from collections.abc import Mapping

from grayline.models import InvalidConfiguration, TerminatorOptions

RESOLUTION_VAR = "GRAYLINE_RESOLUTION"
LONGITUDE_RANGE_VAR = "GRAYLINE_LONGITUDE_RANGE"
TIME_VAR = "GRAYLINE_TIME"

_EPOCH_MS = re.compile(r"[+-]?[0-9]+")


def _float_var(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise InvalidConfiguration(f"{name} must be a number, got {raw!r}") from exc


def options_from_env(environ: Mapping[str, str] | None = None) -> TerminatorOptions:
    """Build TerminatorOptions from environment variables.

    Raises:
        InvalidConfiguration: When a variable is not a positive number.
    """
    if environ is None:
        environ = os.environ
    defaults = TerminatorOptions()
    return TerminatorOptions(
        resolution=_float_var(environ, RESOLUTION_VAR, defaults.resolution),
        longitude_range=_float_var(
            environ, LONGITUDE_RANGE_VAR, defaults.longitude_range
        ),
    )


def time_value(raw: str | None) -> str | int | None:
    """Interpret a configured time string.

    A signed or unsigned run of ASCII digits is epoch milliseconds. Anything
    else is passed on as a time string for `parse_instant` to accept or reject.
    Blank means "now".
    """
    if raw is None:
        return None
    raw = raw.strip()
    if not raw:
        return None
    if _EPOCH_MS.fullmatch(raw):
        return int(raw)
    return raw


def time_from_env(environ: Mapping[str, str] | None = None) -> str | int | None:
    """Configured time value, or None for "now"."""
    if environ is None:
        environ = os.environ
    return time_value(environ.get(TIME_VAR))
