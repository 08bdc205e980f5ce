"""Tests for time input normalization, Julian Day and GMST."""

import math
from datetime import date, datetime, timezone

import pytest
from pytz import timezone as pytz_timezone
from pytz import utc

from grayline.models import Instant
from grayline.timeconv import (
    InvalidTimeInput,
    julian_day_from_epoch_ms,
    parse_instant,
    to_gmst,
    to_julian_day,
)


def _jd(value) -> float:
    return to_julian_day(parse_instant(value))


# ── parse_instant ─────────────────────────────────────────────────


class TestParseInstant:
    def test_epoch_milliseconds(self):
        assert parse_instant(946728000000) == Instant(epoch_ms=946728000000.0)

    def test_float_milliseconds(self):
        assert parse_instant(1.5) == Instant(epoch_ms=1.5)

    def test_aware_datetime(self):
        dt = datetime(2000, 1, 1, 12, 0, tzinfo=utc)
        assert parse_instant(dt).epoch_ms == 946728000000.0

    def test_naive_datetime_is_utc(self):
        assert parse_instant(datetime(2000, 1, 1, 12, 0)).epoch_ms == 946728000000.0

    def test_other_timezone_is_converted(self):
        seoul = pytz_timezone("Asia/Seoul")
        dt = seoul.localize(datetime(2000, 1, 1, 21, 0))
        assert parse_instant(dt).epoch_ms == 946728000000.0

    def test_date_is_midnight_utc(self):
        assert parse_instant(date(1970, 1, 2)).epoch_ms == 86400000.0

    @pytest.mark.parametrize(
        "text",
        [
            "2000-01-01T12:00:00Z",
            "2000-01-01T12:00:00+00:00",
            "2000-01-01 12:00",
            "  2000-01-01T12:00  ",
            "2000-01-01T21:00:00+09:00",
        ],
    )
    def test_strings(self, text):
        assert parse_instant(text).epoch_ms == 946728000000.0

    def test_instant_passthrough(self):
        instant = Instant(epoch_ms=42.0)
        assert parse_instant(instant) is instant

    def test_none_uses_injected_clock(self):
        fixed = datetime(2000, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert parse_instant(None, clock=lambda: fixed).epoch_ms == 946728000000.0

    def test_none_uses_system_clock_by_default(self):
        before = datetime.now(utc).timestamp() * 1000
        instant = parse_instant()
        after = datetime.now(utc).timestamp() * 1000
        assert before - 1 <= instant.epoch_ms <= after + 1

    @pytest.mark.parametrize(
        "value",
        [
            "not a time",
            "2024-13-01",
            "",
            True,
            [2000, 1, 1],
            {"time": 0},
            float("nan"),
            float("inf"),
            1e20,
            10**400,
            "+-1",
            "--5",
            "²",
            "0001-01-01T00:00:00+09:00",
        ],
    )
    def test_invalid_input(self, value):
        with pytest.raises(InvalidTimeInput):
            parse_instant(value)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            parse_instant("yesterday-ish")


# ── Julian Day ────────────────────────────────────────────────────


class TestJulianDay:
    def test_j2000_exact(self):
        assert _jd("2000-01-01T12:00:00Z") == 2451545.0

    def test_unix_epoch(self):
        assert _jd(0) == 2440587.5

    def test_day_boundary_is_noon(self):
        assert _jd("2024-01-01T00:00:00Z") == 2460310.5
        assert _jd("2024-01-01T12:00:00Z") == 2460311.0
        assert math.floor(_jd("2024-01-01T11:59:59Z")) == 2460310

    def test_meeus_sputnik(self):
        """Meeus example 7.a: 1957 October 4.81 → JD 2436116.31."""
        assert _jd("1957-10-04T19:26:24Z") == pytest.approx(2436116.31, abs=1e-8)

    def test_january_and_february_use_previous_year(self):
        assert _jd("1988-01-27T00:00:00Z") == 2447187.5
        assert _jd("2000-02-29T00:00:00Z") == 2451603.5

    def test_milliseconds_are_included(self):
        delta = _jd(1500) - _jd(0)
        assert delta == pytest.approx(1.5 / 86400.0, abs=1e-9)

    @pytest.mark.parametrize(
        "text",
        [
            "1582-10-15T00:00:00Z",
            "1969-07-20T20:17:40Z",
            "2024-03-20T03:06:00Z",
            "2100-12-31T23:59:59.999Z",
            "0001-01-01T00:00:00Z",
        ],
    )
    def test_calendar_matches_epoch_formula(self, text):
        instant = parse_instant(text)
        assert to_julian_day(instant) == pytest.approx(
            julian_day_from_epoch_ms(instant.epoch_ms), abs=1e-6
        )

    def test_epoch_formula_negative_and_far_values(self):
        assert julian_day_from_epoch_ms(-86400000.0) == 2440586.5
        assert math.isfinite(julian_day_from_epoch_ms(1e18))
        assert math.isfinite(julian_day_from_epoch_ms(-1e18))


# ── GMST ──────────────────────────────────────────────────────────


class TestGMST:
    def test_j2000_reference(self):
        assert to_gmst(2451545.0) == pytest.approx(18.697374558, abs=1e-9)
        assert to_gmst(2451545.0) == pytest.approx(18.697, abs=0.01)

    @pytest.mark.parametrize("jd", [-1e7, -0.5, 0.0, 2451545.0, 2460311.25, 5e6])
    def test_range(self, jd):
        gmst = to_gmst(jd)
        assert 0.0 <= gmst < 24.0

    def test_sidereal_day_is_shorter(self):
        """After one solar day GMST has advanced by about 3m56s."""
        advance = (to_gmst(2451546.0) - to_gmst(2451545.0)) % 24
        assert advance == pytest.approx(0.0657098, abs=1e-6)

    @pytest.mark.parametrize(
        "when",
        [
            (2000, 1, 1, 12, 0, 0),
            (1987, 4, 10, 19, 21, 0),
            (2015, 6, 30, 0, 0, 0),
            (2024, 3, 20, 3, 6, 0),
        ],
    )
    def test_against_skyfield(self, when):
        skyfield_api = pytest.importorskip("skyfield.api")
        ts = skyfield_api.load.timescale()
        expected = ts.utc(*when).gmst
        got = to_gmst(_jd(datetime(*when, tzinfo=utc)))
        diff = (got - expected + 12) % 24 - 12
        assert abs(diff) < 1e-3
