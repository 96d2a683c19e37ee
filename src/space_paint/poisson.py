"""Blue-noise point sampling (Bridson Poisson-disk with center bias).

Points are accepted only if no earlier point lies closer than
``min_distance``. A background grid with cells of side ``min_distance/√2``
holds at most one point per cell, so a 5×5 cell neighborhood scan is enough
to check a candidate.

Algorithm:
    1. Seed point: inside a disk of radius 0.3·min(w, h) around the canvas
       center with probability ``center_bias``, else uniform in the canvas.
    2. Pick a random active point; try up to ``max_attempts`` candidates in
       the annulus [d, 2d] around it, some pulled 10% toward the center.
    3. Accept the first valid candidate, or retire the active point once all
       attempts fail.
    4. Stop when no active points remain.

Invariants:
    - Every call builds its own grid and active list; nothing survives a call
    - Retired points are removed with an order-preserving delete, so later
      random index draws see the same active list order on every run
    - Output is in acceptance order, seed point first
    - Coordinates are integers in [0, w-1] × [0, h-1] (round half up)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, Union

from src.space_paint.prng import Mulberry32
from src.space_paint.scene import Point
from src.utils.validators import ConfigurationError, SamplingConfig, coerce_sampling_config

logger = logging.getLogger(__name__)

CENTER_RADIUS_FRACTION = 0.3
CENTER_PULL = 0.1


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +inf."""
    return math.floor(value + 0.5)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


@dataclass
class _SamplingContext:
    """Mutable working state of one sampling call."""

    config: SamplingConfig
    cell_size: float
    grid_width: int
    grid_height: int
    grid: list[list[Point | None]]
    active: list[Point] = field(default_factory=list)
    points: list[Point] = field(default_factory=list)

    @classmethod
    def create(cls, config: SamplingConfig) -> _SamplingContext:
        cell_size = config.min_distance / math.sqrt(2)
        grid_width = math.ceil(config.width / cell_size)
        grid_height = math.ceil(config.height / cell_size)
        grid = [[None] * grid_width for _ in range(grid_height)]
        return cls(config, cell_size, grid_width, grid_height, grid)

    @property
    def center(self) -> tuple[float, float]:
        return self.config.width / 2, self.config.height / 2

    def cell_of(self, point: Point) -> tuple[int, int]:
        return math.floor(point.x / self.cell_size), math.floor(point.y / self.cell_size)

    def add(self, point: Point) -> None:
        self.points.append(point)
        self.active.append(point)
        gx, gy = self.cell_of(point)
        self.grid[gy][gx] = point

    def is_valid(self, point: Point) -> bool:
        cfg = self.config
        if not (0 <= point.x < cfg.width and 0 <= point.y < cfg.height):
            return False

        gx, gy = self.cell_of(point)
        min_d2 = cfg.min_distance * cfg.min_distance
        for y in range(max(0, gy - 2), min(self.grid_height - 1, gy + 2) + 1):
            row = self.grid[y]
            for x in range(max(0, gx - 2), min(self.grid_width - 1, gx + 2) + 1):
                other = row[x]
                if other is None:
                    continue
                dx = point.x - other.x
                dy = point.y - other.y
                if dx * dx + dy * dy < min_d2:
                    return False
        return True


def _seed_point(rng: Mulberry32, ctx: _SamplingContext) -> Point:
    cfg = ctx.config
    bias = cfg.center_bias
    if bias > 0 and rng.next() < bias:
        cx, cy = ctx.center
        dx, dy = rng.point_in_circle(min(cfg.width, cfg.height) * CENTER_RADIUS_FRACTION)
        x, y = round_half_up(cx + dx), round_half_up(cy + dy)
    else:
        x = round_half_up(rng.next_float(0, cfg.width))
        y = round_half_up(rng.next_float(0, cfg.height))
    # next_float(0, w) can round up to w itself
    return Point(int(_clamp(x, 0, cfg.width - 1)), int(_clamp(y, 0, cfg.height - 1)))


def _candidate_around(rng: Mulberry32, ctx: _SamplingContext, origin: Point) -> Point:
    cfg = ctx.config
    d = cfg.min_distance
    angle = rng.next_float(0, math.pi * 2)
    radius = rng.next_float(d, d * 2)

    x = origin.x + math.cos(angle) * radius
    y = origin.y + math.sin(angle) * radius

    if cfg.center_bias > 0 and rng.next() < cfg.center_bias * 0.5:
        cx, cy = ctx.center
        x += (cx - x) * CENTER_PULL
        y += (cy - y) * CENTER_PULL

    return Point(
        round_half_up(_clamp(x, 0, cfg.width - 1)),
        round_half_up(_clamp(y, 0, cfg.height - 1)),
    )


def sample_poisson_disk(
    rng: Mulberry32,
    config: Union[SamplingConfig, Mapping[str, Any]],
) -> list[Point]:
    """Sample points with a guaranteed minimum pairwise distance.

    Parameters
    ----------
    rng : Mulberry32
        Generator; advanced in place by the draws this call consumes
    config : SamplingConfig or mapping
        Canvas size and sampling parameters

    Returns
    -------
    list[Point]
        Points in acceptance order (seed point first); never empty

    Raises
    ------
    ConfigurationError
        If the config is invalid (raised before any draw)
    """
    cfg = coerce_sampling_config(config)
    ctx = _SamplingContext.create(cfg)
    draws_before = rng.draws

    ctx.add(_seed_point(rng, ctx))

    while ctx.active:
        index = rng.next_int(0, len(ctx.active))
        current = ctx.active[index]

        for _ in range(cfg.max_attempts):
            candidate = _candidate_around(rng, ctx, current)
            if ctx.is_valid(candidate):
                ctx.add(candidate)
                break
        else:
            del ctx.active[index]

    logger.debug(
        "Poisson-disk: %d points on %dx%d (d=%.1f, attempts=%d, bias=%.2f, draws=%d)",
        len(ctx.points), cfg.width, cfg.height, cfg.min_distance,
        cfg.max_attempts, cfg.center_bias, rng.draws - draws_before,
    )
    return ctx.points


def thin_points(rng: Mulberry32, points: Sequence[Point], count: int) -> list[Point]:
    """Keep ``count`` points chosen by a seeded shuffle, in original order.

    Parameters
    ----------
    rng : Mulberry32
        Generator; consumes len(points) - 1 draws when thinning happens
    points : Sequence[Point]
        Sampled points in acceptance order
    count : int
        Number of points to keep

    Returns
    -------
    list[Point]
        Subset in the same relative order as ``points``; all of them (and no
        draws) when there are at most ``count``

    Raises
    ------
    ConfigurationError
        If count is negative
    """
    if count < 0:
        raise ConfigurationError(f"point count must be >= 0, got {count}")
    if len(points) <= count:
        return list(points)

    keep = sorted(rng.shuffle(range(len(points)))[:count])
    return [points[i] for i in keep]


def point_count(width: int, height: int, density_per_thousand: float) -> int:
    """Target point count for a density per 1000 px² of canvas.

    Examples
    --------
    >>> point_count(1000, 1000, 2.8)
    2800
    """
    return round_half_up(density_per_thousand * width * height / 1000)
