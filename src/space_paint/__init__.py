"""Deterministic starfield/nebula scene generation.

Pipeline (strict one-way dependency):
    compose -> layers -> poisson -> prng

Modules:
    - prng:    Mulberry32 generator and derived draws
    - poisson: Poisson-disk sampler with center bias, thinning, density counts
    - layers:  point -> placement record attribution (size, color, alpha, detail)
    - compose: layer orchestration for a canvas and seed
    - scene:   immutable output records

Invariants:
    - One integer seed determines the whole Scene, record order included
    - No module-level mutable state; every call starts from fresh buffers
    - Output is renderer-agnostic; textures, sprites and shaders live elsewhere

Usage:
    from src.space_paint import compose_scene

    scene = compose_scene(1337, 800, 600)
    for name, records in scene:
        ...
"""

from .compose import compose_scene, default_scene_config, target_count
from .layers import generate_layer
from .poisson import point_count, sample_poisson_disk, thin_points
from .prng import DEFAULT_SEED, Mulberry32, create_random
from .scene import NebulaDetail, PlacementRecord, Point, Scene, SceneLayer, Streak
from ..utils.validators import ConfigurationError, SceneConfigV1, load_scene_config

__all__ = [
    'ConfigurationError',
    'DEFAULT_SEED',
    'Mulberry32',
    'NebulaDetail',
    'PlacementRecord',
    'Point',
    'Scene',
    'SceneConfigV1',
    'SceneLayer',
    'Streak',
    'compose_scene',
    'create_random',
    'default_scene_config',
    'generate_layer',
    'load_scene_config',
    'point_count',
    'sample_poisson_disk',
    'target_count',
    'thin_points',
]
