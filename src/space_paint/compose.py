"""Composition orchestrator: seed + canvas + config -> Scene.

Runs every layer of a scene config in declared order (background first)
over one freshly seeded generator:

    for each layer:
        sample points (Poisson-disk)   or   one full-canvas anchor (overlay)
        thin to the layer's target count
        attribute records

Target counts:
    - count:                explicit
    - density_per_thousand: round(density × w × h / 1000)
    - area_per_point:       round(w × h / area_per_point)
    - min_count / max_count clamp the result; no source keeps every point

compose_scene() reads no module state and writes none, so identical inputs
always give a bit-identical Scene. The default config is a frozen model
loaded once from configs/space_paint/scene.v1.yaml.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from src.space_paint.layers import generate_layer
from src.space_paint.poisson import point_count, round_half_up, sample_poisson_disk, thin_points
from src.space_paint.prng import Mulberry32, create_random
from src.space_paint.scene import Point, Scene, SceneLayer
from src.utils import profiler, validators
from src.utils.validators import ConfigurationError, LayerSpec, SceneConfigV1

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "space_paint" / "scene.v1.yaml"


@lru_cache(maxsize=1)
def default_scene_config() -> SceneConfigV1:
    """Packaged palette and layer table (immutable, loaded once)."""
    return validators.load_scene_config(DEFAULT_CONFIG_PATH)


def _validate_canvas(width: Any, height: Any) -> None:
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"canvas {name} must be an integer, got {value!r}")
        if value <= 0:
            raise ConfigurationError(f"canvas {name} must be positive, got {value}")


def target_count(spec: LayerSpec, width: int, height: int) -> Optional[int]:
    """Number of records a layer should keep on a width × height canvas.

    Returns
    -------
    int or None
        Clamped target, or None when the layer has no count source
    """
    if spec.count is not None:
        count = spec.count
    elif spec.density_per_thousand is not None:
        count = point_count(width, height, spec.density_per_thousand)
    elif spec.area_per_point is not None:
        count = round_half_up(width * height / spec.area_per_point)
    else:
        return None

    if spec.min_count is not None:
        count = max(spec.min_count, count)
    if spec.max_count is not None:
        count = min(spec.max_count, count)
    return count


def _layer_points(rng: Mulberry32, spec: LayerSpec, width: int, height: int) -> list[Point]:
    if spec.sampling is None:
        return [Point(0, 0)]

    points = sample_poisson_disk(rng, validators.sampling_config(
        width=width,
        height=height,
        min_distance=spec.sampling.min_distance,
        max_attempts=spec.sampling.max_attempts,
        center_bias=spec.sampling.center_bias,
    ))
    count = target_count(spec, width, height)
    if count is None:
        return points

    kept = thin_points(rng, points, count)
    if len(kept) < count:
        logger.debug(
            "Layer '%s': canvas fits %d points, below target %d", spec.name, len(kept), count
        )
    return kept


def compose_scene(
    seed: int,
    width: int,
    height: int,
    config: Union[SceneConfigV1, Mapping[str, Any], None] = None,
) -> Scene:
    """Generate every layer of a scene.

    Parameters
    ----------
    seed : int
        Root of all randomness (reduced to 32 bits)
    width, height : int
        Canvas size in pixels, positive
    config : SceneConfigV1 or mapping, optional
        Palette and layer table; None uses default_scene_config()

    Returns
    -------
    Scene
        Layers in declared order, records in sampling order

    Raises
    ------
    ConfigurationError
        If the canvas or config is invalid (raised before any sampling)
    """
    _validate_canvas(width, height)
    if config is None:
        config = default_scene_config()
    elif not isinstance(config, SceneConfigV1):
        config = validators.scene_config(dict(config))

    rng = create_random(seed)
    layers = []
    with profiler.timer(f"compose seed={seed} {width}x{height}"):
        for spec in config.layers:
            with profiler.timer(f"layer {spec.name}"):
                points = _layer_points(rng, spec, width, height)
                records = generate_layer(rng, spec, points, canvas_size=(width, height))
            layers.append(SceneLayer(spec.name, spec.kind, spec.blend, tuple(records)))

    scene = Scene(seed=seed, width=width, height=height, layers=tuple(layers))
    logger.info(
        "Composed scene seed=%d %dx%d: %s (draws=%d)",
        seed, width, height,
        ", ".join(f"{layer.name}={len(layer)}" for layer in layers),
        rng.draws,
    )
    return scene
