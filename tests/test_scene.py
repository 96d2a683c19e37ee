"""Test scene record types.

Tests for src.space_paint.scene:
    - to_dict() output is JSON-safe and complete
    - Fingerprints follow record values
    - Scene iteration, lookup and counts
    - as_arrays() column shapes, dtypes, tints and depth brightness

Run:
    pytest tests/test_scene.py -v
"""

import json

import numpy as np
import pytest

from src.space_paint.scene import NebulaDetail, PlacementRecord, Point, Scene, SceneLayer, Streak

PALETTE = (0xFFFFFF, 0xFF0000, 0x0000FF)


@pytest.fixture
def scene():
    stars = SceneLayer("stars", "dot", "normal", (
        PlacementRecord(Point(50, 25), 1, 0, 0.9, "dot"),
        PlacementRecord(Point(0, 0), 2, 1, 0.8, "dot"),
        PlacementRecord(Point(99, 49), 1, 2, 0.75, "dot"),
    ))
    streak = Streak(width=8, length=40.5, angle=1.25, alpha=0.06, color_index=2)
    nebula = SceneLayer("nebulae", "nebula", "screen", (
        PlacementRecord(Point(40, 20), 30.0, 1, 0.05, "nebula",
                        NebulaDetail(noise_alpha=0.08, streaks=(streak,))),
    ))
    return Scene(seed=7, width=100, height=50, layers=(stars, nebula))


# ============================================================================
# SERIALIZATION
# ============================================================================

def test_record_to_dict():
    record = PlacementRecord(Point(3, 4), 2, 1, 0.5, "sparkle")
    assert record.to_dict() == {
        "x": 3, "y": 4, "size": 2, "color_index": 1, "alpha": 0.5, "kind": "sparkle",
    }


def test_nebula_record_to_dict(scene):
    d = scene.layer("nebulae").records[0].to_dict()
    assert d["detail"] == {
        "noise_alpha": 0.08,
        "streaks": [{"width": 8, "length": 40.5, "angle": 1.25, "alpha": 0.06, "color_index": 2}],
    }


def test_scene_to_dict_is_json_safe(scene):
    d = scene.to_dict()
    assert json.loads(json.dumps(d)) == d
    assert d["seed"] == 7
    assert [layer["name"] for layer in d["layers"]] == ["stars", "nebulae"]
    assert d["layers"][1]["blend"] == "screen"
    assert len(d["layers"][0]["records"]) == 3


def test_fingerprint_tracks_values(scene):
    same = Scene(seed=7, width=100, height=50, layers=scene.layers)
    assert same.fingerprint() == scene.fingerprint()
    assert len(scene.fingerprint()) == 64

    stars = scene.layers[0]
    changed_record = PlacementRecord(Point(50, 25), 1, 0, 0.9000000000000001, "dot")
    changed = Scene(7, 100, 50, (
        SceneLayer(stars.name, stars.kind, stars.blend, (changed_record,) + stars.records[1:]),
        scene.layers[1],
    ))
    assert changed.fingerprint() != scene.fingerprint()


# ============================================================================
# ACCESS
# ============================================================================

def test_iteration_yields_name_and_records(scene):
    pairs = list(scene)
    assert [name for name, _ in pairs] == ["stars", "nebulae"]
    assert pairs[0][1] is scene.layers[0].records


def test_counts(scene):
    assert len(scene) == 2
    assert scene.record_count == 4
    assert len(scene.layer("stars")) == 3


def test_layer_points(scene):
    assert scene.layer("stars").points == [Point(50, 25), Point(0, 0), Point(99, 49)]
    assert tuple(Point(5, 6)) == (5, 6)


def test_unknown_layer(scene):
    with pytest.raises(KeyError, match="comets"):
        scene.layer("comets")


def test_records_immutable(scene):
    with pytest.raises(AttributeError):
        scene.layers[0].records[0].point.x = 1
    with pytest.raises(AttributeError):
        scene.seed = 1


# ============================================================================
# ARRAYS
# ============================================================================

class TestAsArrays:
    def test_shapes_and_dtypes(self, scene) -> None:
        arrays = scene.as_arrays("stars", PALETTE)
        assert arrays["xy"].shape == (3, 2) and arrays["xy"].dtype == np.int32
        assert arrays["size"].dtype == np.float32
        assert arrays["alpha"].dtype == np.float32
        assert arrays["color_index"].tolist() == [0, 1, 2]
        assert arrays["rgb"].shape == (3, 3) and arrays["rgb"].dtype == np.float32
        assert arrays["brightness"].shape == (3,)

    def test_tints(self, scene) -> None:
        rgb = scene.as_arrays("stars", PALETTE)["rgb"]
        np.testing.assert_allclose(rgb, [[1, 1, 1], [1, 0, 0], [0, 0, 1]])

    def test_linear_tints(self, scene) -> None:
        """Pure primaries are fixed points of the sRGB transfer function."""
        rgb = scene.as_arrays("stars", (0x808080, 0xFF0000, 0x0000FF), linear=True)["rgb"]
        assert rgb[0, 0] == pytest.approx(0.2158605, abs=1e-5)
        np.testing.assert_allclose(rgb[1:], [[1, 0, 0], [0, 0, 1]], atol=1e-6)

    def test_depth_brightness(self, scene) -> None:
        brightness = scene.as_arrays("stars", PALETTE)["brightness"]
        # Center of the canvas -> 0.9, corner -> 1.1
        assert brightness[0] == pytest.approx(0.9)
        assert brightness[1] == pytest.approx(1.1)
        assert 0.9 < brightness[2] < 1.1

    def test_empty_layer(self) -> None:
        scene = Scene(1, 10, 10, (SceneLayer("empty", "dot", "normal", ()),))
        arrays = scene.as_arrays("empty", PALETTE)
        assert arrays["xy"].shape == (0, 2)
        assert arrays["rgb"].shape == (0, 3)
        assert arrays["brightness"].shape == (0,)
