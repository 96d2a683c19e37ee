"""Palette color conversions.

Provides:
    - hex_to_rgb(): 0xRRGGBB integer -> sRGB floats in [0, 1]
    - palette_to_array(): palette tuple -> (N, 3) float32 array
    - srgb_to_linear(): exact sRGB transfer function (numpy)

Used by:
    - Scene.as_arrays(): per-record tint columns for renderers
    - CLI summary output (hex strings)

Invariants:
    - Palette entries are 24-bit integers (validated by SceneConfigV1)
    - Float colors are sRGB [0, 1] unless explicitly converted to linear
"""

from typing import Sequence, Tuple

import numpy as np


def hex_to_rgb(value: int) -> Tuple[float, float, float]:
    """Convert 0xRRGGBB to sRGB floats.

    Examples
    --------
    >>> hex_to_rgb(0xff8000)
    (1.0, 0.5019607843137255, 0.0)
    """
    if not 0 <= value <= 0xFFFFFF:
        raise ValueError(f"Not a 24-bit RGB value: {value!r}")
    return (
        ((value >> 16) & 0xFF) / 255.0,
        ((value >> 8) & 0xFF) / 255.0,
        (value & 0xFF) / 255.0,
    )


def hex_string(value: int) -> str:
    """Format 0xRRGGBB as '#rrggbb'."""
    return f"#{value:06x}"


def palette_to_array(palette: Sequence[int]) -> np.ndarray:
    """Convert a palette to an (N, 3) float32 sRGB array."""
    if len(palette) == 0:
        return np.zeros((0, 3), dtype=np.float32)
    return np.asarray([hex_to_rgb(c) for c in palette], dtype=np.float32)


def srgb_to_linear(rgb: np.ndarray) -> np.ndarray:
    """Convert sRGB [0,1] to linear RGB [0,1].

    Notes
    -----
    Uses exact sRGB transfer function (not gamma 2.2 approximation):
        - Linear region for small values: x / 12.92
        - Power region: ((x + 0.055) / 1.055)^2.4
    """
    rgb = np.clip(np.asarray(rgb, dtype=np.float32), 0.0, 1.0)
    return np.where(rgb <= 0.04045, rgb / 12.92, ((rgb + 0.055) / 1.055) ** 2.4).astype(np.float32)
