import math

from tourgen.geo import find_closest, haversine_km, haversine_m, is_within_distance
from tourgen.models import LatLng


def test_haversine_zero_for_identical_points():
    assert haversine_km(52.52, 13.405, 52.52, 13.405) == 0.0
    assert haversine_km(-33.8688, 151.2093, -33.8688, 151.2093) == 0.0


def test_haversine_is_symmetric():
    pairs = [
        ((52.52, 13.405), (48.8566, 2.3522)),
        ((-33.8688, 151.2093), (40.7128, -74.006)),
        ((0.0, 179.9), (0.0, -179.9)),
    ]
    for (lat1, lon1), (lat2, lon2) in pairs:
        assert haversine_km(lat1, lon1, lat2, lon2) == haversine_km(lat2, lon2, lat1, lon1)


def test_haversine_known_distance():
    # Berlin to Paris is roughly 878 km.
    distance = haversine_km(52.52, 13.405, 48.8566, 2.3522)
    assert 870 < distance < 885


def test_haversine_antipodal_is_half_circumference():
    distance = haversine_km(10.0, 20.0, -10.0, -160.0)
    assert not math.isnan(distance)
    assert math.isclose(distance, math.pi * 6371.0, rel_tol=1e-6)


def test_within_distance_is_strict():
    a = LatLng(52.52, 13.405)
    assert is_within_distance(a, a, 0.001)
    assert not is_within_distance(a, a, 0.0)
    b = LatLng(52.5201, 13.405)
    assert 10 < haversine_m(a, b) < 12
    assert is_within_distance(a, b, 20)


def test_find_closest_prefers_first_minimum():
    target = LatLng(0.0, 0.0)
    points = [LatLng(0.0, 1.0), LatLng(0.0, -0.5), LatLng(0.0, 0.5)]
    index, distance = find_closest(target, points)
    assert index == 1
    assert distance > 0
    assert find_closest(target, []) is None
