import pytest

from kartquiz.services.rooms.scoring import distance, round_half_up, score

POINTS = [
    (59.0, 18.0),
    (59.1, 18.1),
    (-33.8688, 151.2093),
    (40.7128, -74.0060),
    (0.0, 179.9),
    (0.0, -179.9),
    (90.0, 0.0),
]


@pytest.mark.parametrize('point', POINTS)
def test_distance_to_self_is_zero(point):
    assert distance(point, point) == 0


@pytest.mark.parametrize('a', POINTS)
@pytest.mark.parametrize('b', POINTS)
def test_distance_is_symmetric(a, b):
    assert distance(a, b) == pytest.approx(distance(b, a))


def test_distance_known_values():
    # One degree of latitude on a 6371 km sphere
    assert distance((0, 0), (1, 0)) == pytest.approx(111.195, abs=0.01)
    # Across the antimeridian the short way round
    assert distance((0, 179.9), (0, -179.9)) == pytest.approx(22.24, abs=0.05)
    # Antipodes are half the circumference
    assert distance((0, 0), (0, 180)) == pytest.approx(20015.09, abs=0.1)


def test_score_bounds():
    assert score(0, 500) == 1000
    assert score(500, 500) == 0
    assert score(500.01, 500) == 0
    assert score(10_000, 500) == 0
    assert score(250, 500) == 500


def test_score_is_non_increasing_in_distance():
    values = [score(d, 500) for d in range(0, 600, 7)]
    assert all(later <= earlier for earlier, later in zip(values, values[1:]))
    assert all(0 <= v <= 1000 for v in values)


@pytest.mark.parametrize('max_distance', [0, -1, -500])
def test_non_positive_radius_never_scores(max_distance):
    assert score(0, max_distance) == 0
    assert score(10, max_distance) == 0


def test_halves_round_up():
    assert round_half_up(10.5) == 11
    assert round_half_up(10.49) == 10
    assert round_half_up(0.5) == 1
    # 1000 * (1 - 3/16) is exactly 812.5
    assert score(3, 16) == 813
