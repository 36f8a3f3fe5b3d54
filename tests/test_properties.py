import math

from hypothesis import assume, given, strategies as st

from greatcircle.geometry import Coordinate
from greatcircle.geometry_utils import (
    angular_distance,
    closest_point,
    cross_track_error,
    destination,
    distance,
    initial_bearing,
)
from greatcircle.proximity import points_in_reach
from greatcircle.units import (
    degrees_to_radians,
    nm_to_radians,
    normalize_bearing,
    normalize_longitude,
    radians_to_degrees,
    radians_to_nm,
)

# Strategy for coordinates in radians, away from the poles
valid_lat = st.floats(-1.4, 1.4)
valid_lon = st.floats(-3.1, 3.1)
valid_coordinate = st.builds(Coordinate, latitude=valid_lat, longitude=valid_lon)
any_angle = st.floats(-100.0, 100.0)
finite_value = st.floats(
    min_value=-1e300, max_value=1e300, allow_nan=False, allow_infinity=False
)


class TestDistanceProperties:

    @given(valid_coordinate, valid_coordinate)
    def test_distance_is_non_negative(self, a, b):
        assert distance(a, b) >= 0

    @given(valid_coordinate)
    def test_distance_to_self_is_zero(self, a):
        assert distance(a, a) == 0

    @given(valid_coordinate, valid_coordinate)
    def test_distance_is_symmetric(self, a, b):
        assert abs(distance(a, b) - distance(b, a)) < 1e-9

    @given(valid_coordinate, valid_coordinate, valid_coordinate)
    def test_triangle_inequality(self, a, b, c):
        ab = angular_distance(a, b)
        bc = angular_distance(b, c)
        ac = angular_distance(a, c)
        assert ab + bc >= ac - 1e-7
        assert ab + ac >= bc - 1e-7
        assert bc + ac >= ab - 1e-7

    @given(valid_coordinate, valid_coordinate)
    def test_distance_at_most_half_circumference(self, a, b):
        assert angular_distance(a, b) <= math.pi


class TestBearingProperties:

    @given(valid_coordinate, valid_coordinate)
    def test_bearing_range(self, a, b):
        assume(angular_distance(a, b) > 1e-6)
        bearing = initial_bearing(a, b)
        assert 0 <= bearing < 2 * math.pi

    @given(valid_coordinate, valid_coordinate)
    def test_destination_reaches_target(self, a, b):
        d = angular_distance(a, b)
        assume(1e-3 < d < math.pi - 1e-3)
        result = destination(a, initial_bearing(a, b), d)
        assert result.isclose(b, abs_tol=1e-8)

    @given(valid_coordinate, st.floats(0.0, 2 * math.pi), st.floats(1e-3, 3.0))
    def test_destination_distance(self, origin, bearing, d):
        result = destination(origin, bearing, d)
        assert math.isclose(angular_distance(origin, result), d, abs_tol=1e-8)


class TestProjectionProperties:

    @given(valid_coordinate, valid_coordinate, valid_coordinate)
    def test_closest_point_is_idempotent(self, start, end, point):
        d = angular_distance(start, end)
        assume(1e-3 < d < math.pi - 0.1)
        assume(abs(cross_track_error(start, end, point)) < 1.0)
        nearest = closest_point(start, end, point)
        assert closest_point(start, end, nearest).isclose(nearest, abs_tol=1e-7)

    @given(valid_coordinate, valid_coordinate, valid_coordinate)
    def test_closest_point_lies_on_route(self, start, end, point):
        d = angular_distance(start, end)
        assume(1e-3 < d < math.pi - 0.1)
        assume(abs(cross_track_error(start, end, point)) < 1.0)
        nearest = closest_point(start, end, point)
        assert abs(cross_track_error(start, end, nearest)) < 1e-7

    @given(
        st.sampled_from([math.pi / 2, -math.pi / 2]),
        valid_lon,
        valid_coordinate,
        valid_coordinate,
    )
    def test_closest_point_from_pole(self, pole_latitude, pole_longitude, end, point):
        start = Coordinate(pole_latitude, pole_longitude)
        assume(abs(cross_track_error(start, end, point)) < 1.0)
        nearest = closest_point(start, end, point)
        # Longitude is meaningless right at the pole
        assume(angular_distance(start, nearest) > 1e-6)
        assert abs(cross_track_error(start, end, nearest)) < 1e-7
        assert closest_point(start, end, nearest).isclose(nearest, abs_tol=1e-7)
        # The route is the meridian through its end
        assert abs(math.sin(nearest.longitude - end.longitude)) < 1e-7

    @given(valid_coordinate, valid_coordinate, valid_coordinate)
    def test_cross_track_bounded_by_distance(self, start, end, point):
        assume(angular_distance(start, end) > 1e-6)
        xtd = cross_track_error(start, end, point)
        assert abs(xtd) <= angular_distance(start, point) + 1e-7


class TestReachProperties:

    @given(
        st.lists(valid_coordinate, max_size=8),
        st.floats(0.0, 5000.0),
        st.floats(0.0, 5000.0),
    )
    def test_reach_is_monotonic(self, points, r1, r2):
        start, end = Coordinate(0.6629, -2.1301), Coordinate(0.6717, -2.1132)
        small, large = min(r1, r2), max(r1, r2)
        near = points_in_reach(start, end, small, points)
        far = points_in_reach(start, end, large, points)
        assert all(point in far for point in near)

    @given(st.lists(valid_coordinate, max_size=8), st.floats(0.0, 5000.0))
    def test_reach_sorted_by_distance(self, points, max_distance):
        start, end = Coordinate(0.6629, -2.1301), Coordinate(0.6717, -2.1132)
        result = points_in_reach(start, end, max_distance, points)
        distances = [distance(closest_point(start, end, p), p) for p in result]
        assert distances == sorted(distances)
        assert all(d <= max_distance for d in distances)


class TestNormalizationProperties:

    @given(any_angle)
    def test_longitude_range(self, angle):
        result = normalize_longitude(angle)
        assert -math.pi < result <= math.pi
        assert math.isclose(math.sin(result), math.sin(angle), abs_tol=1e-9)
        assert math.isclose(math.cos(result), math.cos(angle), abs_tol=1e-9)

    @given(any_angle)
    def test_bearing_range(self, angle):
        result = normalize_bearing(angle)
        assert 0 <= result < 2 * math.pi


class TestConversionProperties:

    @given(finite_value)
    def test_degrees_radians_round_trip(self, x):
        result = radians_to_degrees(degrees_to_radians(x))
        assert math.isclose(result, x, rel_tol=1e-12, abs_tol=1e-300)

    @given(finite_value)
    def test_nautical_miles_radians_round_trip(self, x):
        result = radians_to_nm(nm_to_radians(x))
        assert math.isclose(result, x, rel_tol=1e-12, abs_tol=1e-300)
