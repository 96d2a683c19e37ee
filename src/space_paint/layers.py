"""Layer generator: sampled points -> attributed placement records.

Draw order per point (fixed; changing it changes every later record):
    1. size   (one draw)
    2. color  (one draw, weighted palette choice)
    3. alpha  (one draw)
    4. detail, nebula layers only:
       noise alpha, streak count, then per streak: width, length, angle, alpha

Points are processed in the order given (sampling order). All layers of a
scene share one generator, so a layer's draws start where the previous
layer's stopped.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from src.space_paint.prng import Mulberry32
from src.space_paint.scene import NebulaDetail, PlacementRecord, Point, Streak
from src.utils import validators
from src.utils.validators import AlphaRange, ColorRule, ConfigurationError, DetailRule, LayerSpec, SizeRule

logger = logging.getLogger(__name__)


def draw_size(rng: Mulberry32, rule: SizeRule, canvas_size: Optional[Tuple[int, int]] = None) -> float:
    """Draw one size value according to ``rule``."""
    if rule.mode == "choice":
        value = rng.choice(rule.values)
    elif rule.mode == "int":
        value = rng.next_int(int(rule.min), int(rule.max))
    else:
        value = rng.next_float(rule.min, rule.max)

    if rule.relative:
        if canvas_size is None:
            raise ConfigurationError("relative size rule needs the canvas size")
        value = value * min(canvas_size)
    return value


def draw_color(rng: Mulberry32, rule: ColorRule) -> int:
    """Draw one palette index."""
    return rule.indices[rng.weighted_index(rule.resolved_weights())]


def draw_alpha(rng: Mulberry32, rule: AlphaRange) -> float:
    return rng.next_float(rule.min, rule.max)


def draw_detail(rng: Mulberry32, rule: DetailRule, radius: float) -> NebulaDetail:
    """Draw texture-noise opacity and ribbon streaks for a patch of ``radius`` px."""
    noise_alpha = rng.next_float(rule.noise_alpha.min, rule.noise_alpha.max)
    streak_count = rng.next_int(rule.streak_count.min, rule.streak_count.max)

    streaks = []
    for _ in range(streak_count):
        width = rng.next_int(rule.streak_width.min, rule.streak_width.max)
        length = rng.next_float(radius * rule.streak_length.min, radius * rule.streak_length.max)
        angle = rng.next_float(0, math.pi * 2)
        alpha = rng.next_float(rule.streak_alpha.min, rule.streak_alpha.max)
        streaks.append(Streak(width, length, angle, alpha, rule.streak_color_index))

    return NebulaDetail(noise_alpha=noise_alpha, streaks=tuple(streaks))


def generate_layer(
    rng: Mulberry32,
    layer_spec: Union[LayerSpec, Mapping[str, Any]],
    points: Sequence[Point],
    canvas_size: Optional[Tuple[int, int]] = None,
) -> list[PlacementRecord]:
    """Attribute every point of a layer.

    Parameters
    ----------
    rng : Mulberry32
        Shared scene generator, advanced in place
    layer_spec : LayerSpec or mapping
        Attribute rules of the layer
    points : Sequence[Point]
        Sampled points, in sampling order
    canvas_size : (width, height), optional
        Required when the size rule is relative

    Returns
    -------
    list[PlacementRecord]
        One record per point, same order as ``points``

    Raises
    ------
    ConfigurationError
        If the layer spec is invalid, or relative sizes are requested without a
        canvas size (raised before any draw)
    """
    spec = layer_spec if isinstance(layer_spec, LayerSpec) else validators.layer_spec(dict(layer_spec))
    if spec.size.relative and canvas_size is None:
        raise ConfigurationError(f"layer '{spec.name}' has a relative size rule; pass canvas_size")

    draws_before = rng.draws
    records = []
    for point in points:
        size = draw_size(rng, spec.size, canvas_size)
        color_index = draw_color(rng, spec.color)
        alpha = draw_alpha(rng, spec.alpha)
        detail = draw_detail(rng, spec.detail, size) if spec.detail is not None else None
        records.append(PlacementRecord(point, size, color_index, alpha, spec.kind, detail))

    logger.debug("Layer '%s': %d records (draws=%d)", spec.name, len(records), rng.draws - draws_before)
    return records
