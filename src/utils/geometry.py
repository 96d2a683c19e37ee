"""Point-set geometry for sampled layers.

Provides:
    - as_point_array(): points (objects with x/y or 2-tuples) -> (N, 2) float64
    - pairwise_min_distance(): smallest distance between any two points
    - in_bounds_mask(): per-point canvas containment
    - center_fraction(): share of points within a radius of the canvas center
    - depth_brightness(): radial brightness multiplier (0.9 at center, 1.1 at corners)

Used by:
    - Scene.as_arrays(): brightness column for renderers
    - CLI summary: spacing and center statistics per layer
    - Tests: minimum-distance, bounds and center-bias properties

All coordinates in canvas pixels, origin top-left, +Y down.
"""

from typing import Iterable, Tuple

import numpy as np


def as_point_array(points: Iterable) -> np.ndarray:
    """Stack points into an (N, 2) float64 array.

    Parameters
    ----------
    points : Iterable
        Objects with ``x``/``y`` attributes or (x, y) pairs

    Returns
    -------
    np.ndarray
        Shape (N, 2); (0, 2) for an empty input
    """
    rows = [(p.x, p.y) if hasattr(p, 'x') else tuple(p) for p in points]
    if not rows:
        return np.zeros((0, 2), dtype=np.float64)
    return np.asarray(rows, dtype=np.float64)


def pairwise_min_distance(points: Iterable, chunk: int = 1024) -> float:
    """Smallest Euclidean distance between two distinct points.

    Parameters
    ----------
    points : Iterable
        Point set
    chunk : int
        Rows per block; bounds memory at chunk × N distances

    Returns
    -------
    float
        Minimum distance, ``inf`` for fewer than two points
    """
    pts = as_point_array(points)
    n = len(pts)
    if n < 2:
        return float('inf')

    best = np.inf
    for start in range(0, n, chunk):
        block = pts[start:start + chunk]
        d2 = ((block[:, None, :] - pts[None, :, :]) ** 2).sum(axis=-1)
        # Mask self-distances
        rows = np.arange(len(block))
        d2[rows, start + rows] = np.inf
        best = min(best, float(d2.min()))
    return float(np.sqrt(best))


def in_bounds_mask(points: Iterable, width: int, height: int) -> np.ndarray:
    """Boolean mask of points with 0 <= x < width and 0 <= y < height."""
    pts = as_point_array(points)
    return (
        (pts[:, 0] >= 0) & (pts[:, 0] < width)
        & (pts[:, 1] >= 0) & (pts[:, 1] < height)
    )


def center_fraction(points: Iterable, width: int, height: int, radius_frac: float = 0.3) -> float:
    """Fraction of points within ``radius_frac * min(width, height)`` of the center.

    Returns 0.0 for an empty point set.
    """
    pts = as_point_array(points)
    if len(pts) == 0:
        return 0.0
    center = np.array([width / 2.0, height / 2.0])
    radius = radius_frac * min(width, height)
    dist = np.sqrt(((pts - center) ** 2).sum(axis=-1))
    return float((dist <= radius).mean())


def depth_brightness(xy: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
    """Radial brightness multiplier for stars.

    Parameters
    ----------
    xy : np.ndarray
        Positions, shape (N, 2)
    size : Tuple[int, int]
        Canvas (width, height)

    Returns
    -------
    np.ndarray
        Multipliers, shape (N,): 0.9 at the center rising linearly to 1.1
        at the corners
    """
    width, height = size
    xy = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
    cx, cy = width / 2.0, height / 2.0
    max_distance = np.hypot(cx, cy)
    if max_distance == 0:
        return np.full(len(xy), 0.9)
    distance = np.hypot(xy[:, 0] - cx, xy[:, 1] - cy)
    return 0.9 + (distance / max_distance) * 0.2
