"""Scene records: the renderer-agnostic output of a generation pass.

Every record is an immutable, slotted dataclass. A Scene is the ordered list
of layers (background first) and each layer an ordered tuple of placement
records, in the order their points were sampled.

Renderers map records to drawables on their own (texture by ``kind``, tint
from ``color_index``, blend mode from the layer); nothing here knows about
textures, sprites or shaders.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

from src.utils import color as color_utils, geometry, hashing


@dataclass(frozen=True, slots=True)
class Point:
    """Integer canvas position (px, origin top-left)."""

    x: int
    y: int

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y


@dataclass(frozen=True, slots=True)
class Streak:
    """Ribbon streak drawn from a nebula patch center.

    Parameters
    ----------
    width : int
        Line width (px)
    length : float
        Streak length (px)
    angle : float
        Direction in radians, [0, 2π)
    alpha : float
        Line opacity
    color_index : int
        Palette index of the line color
    """

    width: int
    length: float
    angle: float
    alpha: float
    color_index: int

    def to_dict(self) -> dict:
        return {
            'width': self.width,
            'length': self.length,
            'angle': self.angle,
            'alpha': self.alpha,
            'color_index': self.color_index,
        }


@dataclass(frozen=True, slots=True)
class NebulaDetail:
    """Texture-noise opacity and streaks of one nebula patch."""

    noise_alpha: float
    streaks: tuple[Streak, ...]

    def to_dict(self) -> dict:
        return {
            'noise_alpha': self.noise_alpha,
            'streaks': [s.to_dict() for s in self.streaks],
        }


@dataclass(frozen=True, slots=True)
class PlacementRecord:
    """One fully attributed visual element.

    ``size`` is a scale factor for dots and sparkles and a radius (px) for
    nebula patches. ``detail`` is only set for layers with a detail rule.
    """

    point: Point
    size: float
    color_index: int
    alpha: float
    kind: str
    detail: NebulaDetail | None = None

    def to_dict(self) -> dict:
        d = {
            'x': self.point.x,
            'y': self.point.y,
            'size': self.size,
            'color_index': self.color_index,
            'alpha': self.alpha,
            'kind': self.kind,
        }
        if self.detail is not None:
            d['detail'] = self.detail.to_dict()
        return d


@dataclass(frozen=True, slots=True)
class SceneLayer:
    """Records of one layer plus the renderer hints it was declared with."""

    name: str
    kind: str
    blend: str
    records: tuple[PlacementRecord, ...]

    def __len__(self) -> int:
        return len(self.records)

    @property
    def points(self) -> list[Point]:
        return [r.point for r in self.records]

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'kind': self.kind,
            'blend': self.blend,
            'records': [r.to_dict() for r in self.records],
        }


@dataclass(frozen=True, slots=True)
class Scene:
    """Complete output of one composition pass.

    Iterating yields ``(layer_name, records)`` pairs in declared order.
    """

    seed: int
    width: int
    height: int
    layers: tuple[SceneLayer, ...]

    def __iter__(self) -> Iterator[tuple[str, tuple[PlacementRecord, ...]]]:
        for layer in self.layers:
            yield layer.name, layer.records

    def __len__(self) -> int:
        return len(self.layers)

    @property
    def layer_names(self) -> list[str]:
        return [layer.name for layer in self.layers]

    @property
    def record_count(self) -> int:
        return sum(len(layer) for layer in self.layers)

    def layer(self, name: str) -> SceneLayer:
        for layer in self.layers:
            if layer.name == name:
                return layer
        raise KeyError(f"No layer named '{name}' (layers: {self.layer_names})")

    def to_dict(self) -> dict:
        """JSON/YAML-safe nested dict (ints, floats, strings, lists)."""
        return {
            'seed': self.seed,
            'width': self.width,
            'height': self.height,
            'layers': [layer.to_dict() for layer in self.layers],
        }

    def fingerprint(self) -> str:
        """SHA-256 over to_dict(); equal scenes always share a fingerprint."""
        return hashing.hash_dict(self.to_dict())

    def as_arrays(self, name: str, palette: Sequence[int], linear: bool = False) -> dict[str, np.ndarray]:
        """Column arrays of one layer for batch upload to a renderer.

        Parameters
        ----------
        name : str
            Layer name
        palette : Sequence[int]
            Palette the scene was generated with (0xRRGGBB entries)
        linear : bool
            Return tints in linear RGB instead of sRGB, default False

        Returns
        -------
        dict[str, np.ndarray]
            xy (N, 2) int32, size (N,) float32, alpha (N,) float32,
            color_index (N,) int32, rgb (N, 3) float32,
            brightness (N,) float32 (radial depth multiplier)
        """
        records = self.layer(name).records
        xy = np.asarray([(r.point.x, r.point.y) for r in records], dtype=np.int32).reshape(-1, 2)
        color_index = np.asarray([r.color_index for r in records], dtype=np.int32)
        rgb = color_utils.palette_to_array(palette)[color_index].reshape(-1, 3)
        if linear:
            rgb = color_utils.srgb_to_linear(rgb)
        return {
            'xy': xy,
            'size': np.asarray([r.size for r in records], dtype=np.float32),
            'alpha': np.asarray([r.alpha for r in records], dtype=np.float32),
            'color_index': color_index,
            'rgb': rgb,
            'brightness': geometry.depth_brightness(xy, (self.width, self.height)).astype(np.float32),
        }
