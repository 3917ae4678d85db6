import math
import types

import pytest

from proximity.core import geo
from proximity.core.geo import Coordinate, degrees_to_radians, distance, parse_degree_string
from proximity.errors import ParseError


def test_degrees_to_radians_reference_angles():
    assert degrees_to_radians(0) == 0
    assert degrees_to_radians(180) == pytest.approx(math.pi)
    assert degrees_to_radians(360) == pytest.approx(2 * math.pi)
    # Out-of-range geographic values are still plain arithmetic.
    assert degrees_to_radians(-720) == pytest.approx(-4 * math.pi)


@pytest.mark.parametrize(
    "text, degrees",
    [("0", 0.0), ("180", 180.0), ("360", 360.0), ("-6.238335", -6.238335), ("+1.5", 1.5), (".5", 0.5), ("1e2", 100.0)],
)
def test_parse_degree_string_accepts_decimal_literals(text, degrees):
    assert parse_degree_string(text) == pytest.approx(math.radians(degrees))


@pytest.mark.parametrize(
    "text",
    ["invalid input", "", "FFFFFFFF", " 1.0", "1.0 ", "1_000", "nan", "inf", "1e999", "0x10", "1.2.3", "\u0665\u0663.\u0663", "\uff15\uff13"],
)
def test_parse_degree_string_rejects_non_decimal_text(text):
    with pytest.raises(ParseError) as exc:
        parse_degree_string(text)
    assert exc.value.text == text


def test_parse_error_is_a_value_error():
    with pytest.raises(ValueError, match="invalid decimal degree value"):
        parse_degree_string("north")


def test_distance_to_self_is_zero():
    for lat, lon in [(53.339428, -6.257664), (0, 0), (-33.8688, 151.2093), (89.9, 179.9)]:
        p = Coordinate.from_degrees(lat, lon)
        assert distance(p, p) == pytest.approx(0, abs=1e-3)


def test_distance_varanasi_new_delhi():
    varanasi = Coordinate.from_degrees(25.3209013, 82.921069)
    new_delhi = Coordinate.from_degrees(28.5274229, 77.1389452)
    assert distance(varanasi, new_delhi) == pytest.approx(675, abs=1)
    assert distance(new_delhi, varanasi) == pytest.approx(distance(varanasi, new_delhi))


def test_distance_near_antipodal_is_half_circumference():
    brazil = Coordinate.from_degrees(0.175781, -63.281250)
    indonesia = Coordinate.from_degrees(-0.175781, 116.718750)
    assert distance(brazil, indonesia) == pytest.approx(20000, abs=100)


def test_distance_exact_antipodes_is_pi_times_radius():
    a = Coordinate(lat=0.0, lon=0.0)
    b = Coordinate(lat=0.0, lon=math.pi)
    assert distance(a, b) == pytest.approx(math.pi * 6371)
    assert distance(a, b, radius_km=1.0) == pytest.approx(math.pi)


def test_clamped_distance_never_returns_nan():
    for lat in range(-90, 91, 15):
        for lon in range(-180, 181, 30):
            p = Coordinate.from_degrees(lat + 0.123456789, lon + 0.987654321)
            assert not math.isnan(distance(p, p))


def test_rounding_past_one_is_nan_unclamped_and_zero_clamped(monkeypatch):
    # Make cos() overshoot by one ulp so the central-angle cosine lands just above 1.
    drifting_math = types.SimpleNamespace(**{k: getattr(math, k) for k in dir(math) if not k.startswith("_")})
    drifting_math.cos = lambda x: math.cos(x) * (1 + 2**-52)
    monkeypatch.setattr(geo, "math", drifting_math)

    p = Coordinate(lat=0.0, lon=0.0)

    assert math.isnan(distance(p, p, clamp=False))
    assert distance(p, p, clamp=True) == 0.0


def test_coordinate_degree_roundtrip():
    c = Coordinate.from_degrees(53.2451022, -6.238335)
    lat, lon = c.to_degrees()
    assert lat == pytest.approx(53.2451022)
    assert lon == pytest.approx(-6.238335)
