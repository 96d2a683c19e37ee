"""Test Poisson-disk sampling and thinning.

Tests for src.space_paint.poisson:
    - Minimum pairwise distance holds for every sampled set
    - All points are integers inside [0, w-1] × [0, h-1]
    - Same seed and config -> identical point list; different seed -> different
    - Invalid configs raise ConfigurationError before any PRNG draw
    - Degenerate canvases still return the seed point
    - Center bias raises the share of points near the canvas center
    - thin_points keeps sampling order and consumes n-1 draws

Run:
    pytest tests/test_poisson.py -v
"""

import pytest

from src.space_paint.poisson import point_count, round_half_up, sample_poisson_disk, thin_points
from src.space_paint.prng import create_random
from src.space_paint.scene import Point
from src.utils import geometry, hashing, validators
from src.utils.validators import ConfigurationError


def _sample(seed, **cfg):
    return sample_poisson_disk(create_random(seed), cfg)


# ============================================================================
# SPACING AND BOUNDS
# ============================================================================

@pytest.mark.parametrize("seed,width,height,min_distance,bias", [
    (1, 200, 150, 8, 0.0),
    (2, 320, 240, 12, 0.5),
    (3, 300, 300, 20, 1.0),
    (4, 97, 311, 5.5, 0.3),
])
def test_min_distance_holds(seed, width, height, min_distance, bias):
    points = _sample(seed, width=width, height=height, min_distance=min_distance, center_bias=bias)
    assert len(points) > 1
    assert geometry.pairwise_min_distance(points) >= min_distance


@pytest.mark.parametrize("seed,bias", [(10, 0.0), (11, 0.6), (12, 1.0)])
def test_points_in_bounds_and_integer(seed, bias):
    width, height = 160, 90
    points = _sample(seed, width=width, height=height, min_distance=6, center_bias=bias)
    assert all(isinstance(p, Point) for p in points)
    assert all(isinstance(p.x, int) and isinstance(p.y, int) for p in points)
    assert geometry.in_bounds_mask(points, width, height).all()
    assert all(p.x <= width - 1 and p.y <= height - 1 for p in points)


def test_points_are_unique():
    points = _sample(5, width=200, height=200, min_distance=4)
    assert len(set(points)) == len(points)


def test_fills_canvas_densely():
    """Bridson sampling saturates: no gap much wider than 2d remains."""
    width, height, d = 200, 200, 10
    points = _sample(6, width=width, height=height, min_distance=d)
    # Hexagonal packing bound is ~1.15/d², saturated Bridson lands well above 0.5/d²
    assert len(points) > 0.5 * width * height / (d * d)


# ============================================================================
# DETERMINISM
# ============================================================================

def test_first_point_golden():
    points = _sample(42, width=800, height=600, min_distance=8)
    assert points[0] == Point(481, 269)


def test_full_sequence_golden():
    """Pins the whole emission order, including which active point is retired."""
    points = _sample(42, width=200, height=150, min_distance=10)
    assert len(points) == 209
    assert points[:3] == [Point(120, 67), Point(114, 57), Point(112, 73)]
    assert points[-1] == Point(9, 149)
    assert hashing.hash_dict({"points": [[p.x, p.y] for p in points]}) == (
        "34a2bd92c39fdf15c2619723f9a6b511fb4eb4a6b2be8f651850882e91d8cf33"
    )


def test_same_seed_identical():
    cfg = dict(width=240, height=180, min_distance=9, center_bias=0.4)
    assert _sample(77, **cfg) == _sample(77, **cfg)


def test_different_seed_differs():
    cfg = dict(width=240, height=180, min_distance=9)
    assert _sample(77, **cfg) != _sample(78, **cfg)


def test_no_state_between_calls():
    """A sampling call in between does not change a later identical call."""
    cfg = dict(width=120, height=120, min_distance=7)
    first = _sample(3, **cfg)
    _sample(99, width=300, height=50, min_distance=3)
    assert _sample(3, **cfg) == first


def test_accepts_sampling_config_model():
    cfg = validators.sampling_config(width=150, height=100, min_distance=10, center_bias=0.2)
    assert sample_poisson_disk(create_random(9), cfg) == _sample(
        9, width=150, height=100, min_distance=10, center_bias=0.2
    )


def test_rng_advanced_in_place():
    rng = create_random(4)
    sample_poisson_disk(rng, {"width": 50, "height": 50, "min_distance": 10})
    assert rng.draws > 0


# ============================================================================
# VALIDATION
# ============================================================================

@pytest.mark.parametrize("cfg", [
    {"width": 0, "height": 100, "min_distance": 5},
    {"width": 100, "height": -1, "min_distance": 5},
    {"width": 100, "height": 100, "min_distance": 0},
    {"width": 100, "height": 100, "min_distance": -3},
    {"width": 100, "height": 100, "min_distance": 5, "max_attempts": 0},
    {"width": 100, "height": 100, "min_distance": 5, "center_bias": 1.5},
    {"width": 100, "height": 100, "min_distance": 5, "center_bias": -0.1},
    {"width": 100, "height": 100, "min_distance": float("inf")},
    {"width": 100, "height": 100, "min_distance": float("nan")},
    {"width": 100, "height": 100, "min_distance": 5, "center_bias": float("nan")},
    {"width": 100, "height": 100},
    {"width": 100, "height": 100, "min_distance": 5, "jitter": 1},
])
def test_invalid_config_raises_before_draws(cfg):
    rng = create_random(1)
    with pytest.raises(ConfigurationError):
        sample_poisson_disk(rng, cfg)
    assert rng.draws == 0


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        _sample(1, width=10, height=10, min_distance=0)


# ============================================================================
# DEGENERATE CANVASES
# ============================================================================

def test_single_pixel_canvas():
    assert _sample(7, width=1, height=1, min_distance=100) == [Point(0, 0)]


@pytest.mark.parametrize("bias", [0.0, 1.0])
def test_distance_larger_than_canvas(bias):
    points = _sample(8, width=20, height=10, min_distance=500, center_bias=bias)
    assert len(points) == 1
    assert 0 <= points[0].x < 20 and 0 <= points[0].y < 10


def test_one_pixel_wide_strip():
    points = _sample(13, width=1, height=200, min_distance=10)
    assert all(p.x == 0 for p in points)
    assert geometry.pairwise_min_distance(points) >= 10
    assert len(points) > 5


# ============================================================================
# CENTER BIAS
# ============================================================================

def test_center_bias_increases_center_share():
    """Mean center share over 40 seeds rises with bias.

    A low attempt budget keeps sampling unsaturated, so the pull toward
    the center shows in the point distribution.
    """
    def mean_share(bias):
        shares = []
        for seed in range(40):
            points = _sample(seed, width=240, height=180, min_distance=12,
                             max_attempts=2, center_bias=bias)
            shares.append(geometry.center_fraction(points, 240, 180))
        return sum(shares) / len(shares)

    none, half, full = mean_share(0.0), mean_share(0.5), mean_share(1.0)
    assert none < half < full


def test_full_bias_seeds_near_center():
    width, height = 400, 300
    radius = 0.3 * min(width, height)
    for seed in range(20):
        first = _sample(seed, width=width, height=height, min_distance=50, center_bias=1.0)[0]
        # Rounding can push the seed point up to one pixel past the disk
        assert ((first.x - 200) ** 2 + (first.y - 150) ** 2) ** 0.5 <= radius + 1


# ============================================================================
# THINNING
# ============================================================================

class TestThinPoints:
    points = [Point(i, i * 2) for i in range(6)]

    def test_golden(self) -> None:
        kept = thin_points(create_random(42), self.points, 3)
        assert kept == [self.points[0], self.points[1], self.points[4]]

    def test_keeps_relative_order(self) -> None:
        points = _sample(21, width=200, height=200, min_distance=10)
        kept = thin_points(create_random(5), points, 25)
        assert len(kept) == 25
        positions = [points.index(p) for p in kept]
        assert positions == sorted(positions)

    def test_consumes_n_minus_one_draws(self) -> None:
        rng = create_random(5)
        thin_points(rng, self.points, 2)
        assert rng.draws == len(self.points) - 1

    @pytest.mark.parametrize("count", [6, 10])
    def test_no_thinning_needed(self, count) -> None:
        rng = create_random(5)
        kept = thin_points(rng, self.points, count)
        assert kept == self.points
        assert kept is not self.points
        assert rng.draws == 0

    def test_zero_count(self) -> None:
        assert thin_points(create_random(5), self.points, 0) == []

    def test_negative_count_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            thin_points(create_random(5), self.points, -1)


# ============================================================================
# HELPERS
# ============================================================================

@pytest.mark.parametrize("width,height,density,expected", [
    (1000, 1000, 2.8, 2800),
    (400, 300, 2.8, 336),
    (400, 300, 1.2, 144),
    (10, 10, 0.0, 0),
])
def test_point_count(width, height, density, expected):
    assert point_count(width, height, density) == expected


@pytest.mark.parametrize("value,expected", [(0.5, 1), (1.5, 2), (2.49, 2), (-0.5, 0), (-1.6, -2)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
