"""CLI entry point for terminator computation.

Prints the day/night boundary for a time as JSON:
    uv run grayline --time "2024-06-20 20:51" --format geojson

Options fall back to GRAYLINE_* environment variables (a .env file is honored).
"""

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from grayline.config import options_from_env, time_from_env, time_value
from grayline.models import InvalidConfiguration, TerminatorOptions
from grayline.overlay import TerminatorLayer
from grayline.timeconv import InvalidTimeInput

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grayline",
        description="Compute the day/night terminator as latitude/longitude points.",
    )
    parser.add_argument(
        "--time",
        help="ISO 8601 time (naive = UTC) or epoch milliseconds. Default: now.",
    )
    parser.add_argument(
        "--resolution", type=float, help="Points per degree of longitude."
    )
    parser.add_argument(
        "--longitude-range", type=float, help="Sweep width in degrees."
    )
    parser.add_argument(
        "--format",
        choices=("pairs", "geojson"),
        default="pairs",
        help="pairs: [[lat, lng], ...]; geojson: night-side polygon Feature.",
    )
    parser.add_argument(
        "--closed",
        action="store_true",
        help="Close the pairs through the pole in darkness.",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def _time_arg(raw: str | None) -> str | int | None:
    if raw is None:
        return time_from_env()
    return time_value(raw)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        env_options = options_from_env()
        options = TerminatorOptions(
            resolution=(
                args.resolution
                if args.resolution is not None
                else env_options.resolution
            ),
            longitude_range=(
                args.longitude_range
                if args.longitude_range is not None
                else env_options.longitude_range
            ),
        )
        layer = TerminatorLayer(options=options, time=_time_arg(args.time))
    except (InvalidConfiguration, InvalidTimeInput) as e:
        print(f"grayline: {e}", file=sys.stderr)
        return 2

    logger.info("Terminator for %s", layer.time.isoformat())
    if args.format == "geojson":
        payload = layer.to_geojson()
    elif args.closed:
        payload = layer.polygon()
    else:
        payload = layer.curve.latlngs()
    json.dump(payload, sys.stdout)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
