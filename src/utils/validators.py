"""Schema validation and config loading for scene generation.

Provides centralized validation for every configuration object using pydantic:
    - SamplingConfig: canvas size and Poisson-disk parameters for one sampling pass
    - Layer rules: size, color, alpha and nebula detail distributions
    - LayerSpec: one generation pass (sampling, count source, attribute rules)
    - Scene schema (scene.v1.yaml): palette + ordered layer table

All models are frozen and use tuples for sequences, so a loaded config can be
shared between independent generations without copying.

Validation fails fast: public entry points convert pydantic errors into
ConfigurationError (a ValueError) with the offending field in the message.

Units:
    - Geometry: canvas pixels (px)
    - Alpha: [0.0, 1.0]
    - Colors: 24-bit RGB integers (0xRRGGBB)

Usage:
    from src.utils import validators

    scene_cfg = validators.load_scene_config("configs/space_paint/scene.v1.yaml")
    sampling = validators.sampling_config(width=800, height=600, min_distance=8)
"""

from pathlib import Path
from typing import Any, Dict, Literal, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator


class ConfigurationError(ValueError):
    """Invalid generation configuration (raised before any sampling begins)."""


_FROZEN = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)


# ============================================================================
# SAMPLING
# ============================================================================

class SamplingConfig(BaseModel):
    """Poisson-disk sampling parameters for one canvas (pixels)."""
    model_config = _FROZEN

    width: int = Field(..., gt=0, description="Canvas width (px)")
    height: int = Field(..., gt=0, description="Canvas height (px)")
    min_distance: float = Field(..., gt=0.0, description="Minimum distance between points (px)")
    max_attempts: int = Field(default=30, gt=0, description="Candidates tried per active point")
    center_bias: float = Field(default=0.0, ge=0.0, le=1.0, description="Pull toward canvas center")


class LayerSampling(BaseModel):
    """Per-layer sampling parameters; the canvas size is supplied at compose time."""
    model_config = _FROZEN

    min_distance: float = Field(..., gt=0.0)
    max_attempts: int = Field(default=30, gt=0)
    center_bias: float = Field(default=0.0, ge=0.0, le=1.0)


# ============================================================================
# ATTRIBUTE RULES
# ============================================================================

class FloatRange(BaseModel):
    """Half-open float range [min, max); min == max yields a constant."""
    model_config = _FROZEN

    min: float
    max: float

    @model_validator(mode='after')
    def validate_order(self) -> 'FloatRange':
        if self.max < self.min:
            raise ValueError(f"range max={self.max} is below min={self.min}")
        return self


class IntRange(BaseModel):
    """Half-open integer range [min, max)."""
    model_config = _FROZEN

    min: int
    max: int

    @model_validator(mode='after')
    def validate_order(self) -> 'IntRange':
        if self.max <= self.min:
            raise ValueError(f"integer range [{self.min}, {self.max}) is empty")
        return self


class AlphaRange(FloatRange):
    """Opacity range, both ends within [0, 1]."""
    min: float = Field(..., ge=0.0, le=1.0)
    max: float = Field(..., ge=0.0, le=1.0)


class SizeRule(BaseModel):
    """Size distribution: one PRNG draw per record.

    mode:
        - choice: pick one of ``values``
        - int:    next_int(min, max), exclusive max
        - float:  next_float(min, max)
    relative scales the drawn value by min(width, height) of the canvas.
    """
    model_config = _FROZEN

    mode: Literal["choice", "int", "float"]
    values: Optional[Tuple[Union[int, float], ...]] = None
    min: Optional[float] = None
    max: Optional[float] = None
    relative: bool = False

    @model_validator(mode='after')
    def validate_mode_fields(self) -> 'SizeRule':
        if self.mode == "choice":
            if not self.values:
                raise ValueError("size mode 'choice' requires a non-empty 'values' list")
            if self.min is not None or self.max is not None:
                raise ValueError("size mode 'choice' does not take min/max")
            if any(v <= 0 for v in self.values):
                raise ValueError(f"size values must be positive, got {self.values}")
            return self

        if self.values is not None:
            raise ValueError(f"size mode '{self.mode}' does not take 'values'")
        if self.min is None or self.max is None:
            raise ValueError(f"size mode '{self.mode}' requires min and max")
        if self.min <= 0:
            raise ValueError(f"size min must be positive, got {self.min}")
        if self.mode == "int":
            if self.min != int(self.min) or self.max != int(self.max):
                raise ValueError(f"size mode 'int' needs integer bounds, got [{self.min}, {self.max})")
            if self.max <= self.min:
                raise ValueError(f"integer size range [{self.min}, {self.max}) is empty")
        elif self.max < self.min:
            raise ValueError(f"size max={self.max} is below min={self.min}")
        return self


class ColorRule(BaseModel):
    """Weighted palette choice (one PRNG draw per record).

    ``weights`` defaults to uniform. Weights need not sum to 1.
    """
    model_config = _FROZEN

    indices: Tuple[int, ...] = Field(..., min_length=1)
    weights: Optional[Tuple[float, ...]] = None

    @field_validator('indices')
    @classmethod
    def validate_indices(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        if any(i < 0 for i in v):
            raise ValueError(f"palette indices must be non-negative, got {v}")
        return v

    @model_validator(mode='after')
    def validate_weights(self) -> 'ColorRule':
        if self.weights is None:
            return self
        if len(self.weights) != len(self.indices):
            raise ValueError(
                f"got {len(self.weights)} weights for {len(self.indices)} palette indices"
            )
        if any(w < 0 for w in self.weights):
            raise ValueError(f"color weights must be non-negative, got {self.weights}")
        if sum(self.weights) <= 0:
            raise ValueError("color weights must not all be zero")
        return self

    def resolved_weights(self) -> Tuple[float, ...]:
        return self.weights if self.weights is not None else (1.0,) * len(self.indices)


class DetailRule(BaseModel):
    """Nebula patch detail: texture noise and ribbon streaks.

    Streak length is a factor of the record's drawn size (the patch radius).
    """
    model_config = _FROZEN

    noise_alpha: AlphaRange
    streak_count: IntRange
    streak_width: IntRange
    streak_length: FloatRange
    streak_alpha: AlphaRange
    streak_color_index: int = Field(..., ge=0)

    @field_validator('streak_count')
    @classmethod
    def validate_streak_count(cls, v: IntRange) -> IntRange:
        if v.min < 0:
            raise ValueError(f"streak_count min must be >= 0, got {v.min}")
        return v


# ============================================================================
# LAYER SPEC
# ============================================================================

class LayerSpec(BaseModel):
    """One generation pass producing a single category of placement records.

    Count sources (at most one): ``count``, ``density_per_thousand`` or
    ``area_per_point``. Without any, every sampled point is kept.
    Without ``sampling`` the layer is a full-canvas overlay with one record.
    """
    model_config = _FROZEN

    name: str = Field(..., min_length=1)
    kind: Literal["dot", "sparkle", "nebula", "noise"]
    blend: Literal["normal", "add", "screen"] = "normal"
    sampling: Optional[LayerSampling] = None

    count: Optional[int] = Field(default=None, ge=0)
    density_per_thousand: Optional[float] = Field(default=None, ge=0.0)
    area_per_point: Optional[float] = Field(default=None, gt=0.0)
    min_count: Optional[int] = Field(default=None, ge=0)
    max_count: Optional[int] = Field(default=None, ge=0)

    size: SizeRule
    color: ColorRule
    alpha: AlphaRange
    detail: Optional[DetailRule] = None

    @model_validator(mode='after')
    def validate_counts(self) -> 'LayerSpec':
        sources = [
            name for name in ('count', 'density_per_thousand', 'area_per_point')
            if getattr(self, name) is not None
        ]
        if len(sources) > 1:
            raise ValueError(f"layer '{self.name}' sets conflicting count sources: {sources}")
        if (self.min_count is not None and self.max_count is not None
                and self.min_count > self.max_count):
            raise ValueError(
                f"layer '{self.name}' min_count={self.min_count} exceeds max_count={self.max_count}"
            )
        if self.sampling is None and (sources or self.min_count is not None or self.max_count is not None):
            raise ValueError(f"overlay layer '{self.name}' cannot declare a point count")
        return self

    @model_validator(mode='after')
    def validate_detail_kind(self) -> 'LayerSpec':
        if self.detail is not None and self.kind != "nebula":
            raise ValueError(f"detail rules only apply to nebula layers, not '{self.kind}'")
        return self

    def palette_indices(self) -> Tuple[int, ...]:
        """Every palette index this layer can emit."""
        indices = tuple(self.color.indices)
        if self.detail is not None:
            indices += (self.detail.streak_color_index,)
        return indices


# ============================================================================
# SCENE SCHEMA V1
# ============================================================================

class SceneConfigV1(BaseModel):
    """Scene configuration (scene.v1.yaml schema): palette + ordered layers."""
    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False, populate_by_name=True)

    schema_version: str = Field("scene.v1", alias="schema")
    palette: Tuple[int, ...] = Field(..., min_length=1)
    layers: Tuple[LayerSpec, ...] = Field(..., min_length=1)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "scene.v1":
            raise ValueError(f"Expected schema 'scene.v1', got '{v}'")
        return v

    @field_validator('palette')
    @classmethod
    def validate_palette(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        for color in v:
            if not 0 <= color <= 0xFFFFFF:
                raise ValueError(f"palette color {color!r} is not a 24-bit RGB value")
        return v

    @model_validator(mode='after')
    def validate_layers(self) -> 'SceneConfigV1':
        seen = set()
        for layer in self.layers:
            if layer.name in seen:
                raise ValueError(f"duplicate layer name '{layer.name}'")
            seen.add(layer.name)
            for index in layer.palette_indices():
                if index >= len(self.palette):
                    raise ValueError(
                        f"layer '{layer.name}' references palette index {index}, "
                        f"palette has {len(self.palette)} colors"
                    )
        return self

    def layer(self, name: str) -> LayerSpec:
        for layer in self.layers:
            if layer.name == name:
                return layer
        raise KeyError(f"No layer named '{name}'")


# ============================================================================
# PUBLIC API
# ============================================================================

def _build(model: type, data: Dict[str, Any], what: str):
    try:
        return model(**data)
    except ValidationError as e:
        raise ConfigurationError(f"{what} validation failed: {e}") from e


def sampling_config(**kwargs) -> SamplingConfig:
    """Build a SamplingConfig, raising ConfigurationError on invalid input.

    Examples
    --------
    >>> cfg = sampling_config(width=800, height=600, min_distance=8, center_bias=0.5)
    >>> cfg.max_attempts
    30
    """
    return _build(SamplingConfig, kwargs, "Sampling config")


def coerce_sampling_config(config: Union[SamplingConfig, Dict[str, Any]]) -> SamplingConfig:
    """Accept a SamplingConfig or a plain mapping of its fields."""
    if isinstance(config, SamplingConfig):
        return config
    return sampling_config(**dict(config))


def layer_spec(data: Dict[str, Any]) -> LayerSpec:
    """Build a LayerSpec from a mapping, raising ConfigurationError on failure."""
    return _build(LayerSpec, data, f"Layer '{data.get('name', '?')}'")


def scene_config(data: Dict[str, Any]) -> SceneConfigV1:
    """Build a SceneConfigV1 from a mapping, raising ConfigurationError on failure."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"Scene config must be a mapping, got {type(data).__name__}")
    return _build(SceneConfigV1, data, "Scene config")


def load_scene_config(path: Union[str, Path]) -> SceneConfigV1:
    """Load and validate a scene config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to a scene.v1.yaml file

    Returns
    -------
    SceneConfigV1
        Validated, immutable scene configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ConfigurationError
        If the YAML is malformed or validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scene config not found: {path}")

    try:
        data = fs.load_yaml(path)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{path}: malformed YAML: {e}") from e
    try:
        return scene_config(data)
    except ConfigurationError as e:
        raise ConfigurationError(f"{path}: {e}") from e
