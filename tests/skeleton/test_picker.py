"""Tests for three-tier bone pick resolution."""

from __future__ import annotations

import numpy as np
import pytest

from skelpose.core.math_utils import vec3
from skelpose.core.scene_graph import Bone, SceneNode
from skelpose.skeleton.picker import BonePicker, ancestor_chain, fallback_weights
from skelpose.skeleton.registry import BoneRegistry


# ── Helpers ───────────────────────────────────────────────────────────

CAMERA_POS = vec3(0.0, 0.0, 10.0)
CAMERA_FWD = vec3(0.0, 0.0, -1.0)
ORIGIN = vec3(0.0, 0.0, 0.0)


class _FixedBone:
    """Minimal bone-like object with a fixed world position."""

    def __init__(self, name: str, position):
        self.id = f"id-{name}"
        self.name = name
        self.parent = None
        self.rotation = np.zeros(3)
        self._position = np.asarray(position, dtype=np.float64)

    def get_world_position(self):
        return self._position.copy()


def _picker_with(bones) -> BonePicker:
    reg = BoneRegistry()
    reg.load(bones)
    return BonePicker(reg)


def _arm_rig():
    """armature -> Shoulder -> Elbow -> (HandMesh), plus a sibling Hips bone."""
    armature = SceneNode("armature")
    hips = Bone("Hips", position=(0, 1, 0))
    shoulder = Bone("Shoulder", position=(0.2, 0.5, 0))
    elbow = Bone("Elbow", position=(0.3, 0, 0))
    mesh = SceneNode("HandMesh")
    armature.add(hips)
    hips.add(shoulder)
    shoulder.add(elbow)
    elbow.add(mesh)
    return armature, hips, shoulder, elbow, mesh


# ── Tier 1 and 2 ──────────────────────────────────────────────────────

class TestDirectAndAncestor:

    def test_direct_hit(self):
        _, hips, shoulder, elbow, _ = _arm_rig()
        picker = _picker_with([hips, shoulder, elbow])
        result = picker.resolve(elbow.id, [shoulder.id, hips.id], ORIGIN, CAMERA_POS, CAMERA_FWD)
        assert result == elbow.id

    def test_direct_hit_ignores_ancestors_and_fallback(self):
        _, hips, shoulder, elbow, _ = _arm_rig()
        picker = _picker_with([hips, shoulder, elbow])
        # hit point right on Hips would win the fallback
        hit = hips.get_world_position()
        result = picker.resolve(shoulder.id, [hips.id], hit, CAMERA_POS, CAMERA_FWD)
        assert result == shoulder.id

    def test_ancestor_walk_nearest_first(self):
        _, hips, shoulder, elbow, mesh = _arm_rig()
        picker = _picker_with([hips, shoulder, elbow])
        chain = ancestor_chain(mesh)
        result = picker.resolve(mesh.id, chain, hips.get_world_position(), CAMERA_POS, CAMERA_FWD)
        assert result == elbow.id

    def test_ancestor_walk_skips_non_bones(self):
        _, hips, shoulder, elbow, mesh = _arm_rig()
        picker = _picker_with([hips, shoulder])
        # Elbow is not loaded, so the walk continues to Shoulder
        result = picker.resolve(mesh.id, ancestor_chain(mesh), ORIGIN, CAMERA_POS, CAMERA_FWD)
        assert result == shoulder.id

    def test_ancestor_chain(self):
        armature, hips, shoulder, elbow, mesh = _arm_rig()
        assert ancestor_chain(mesh) == [elbow.id, shoulder.id, hips.id, armature.id]
        assert ancestor_chain(armature) == []

    def test_unknown_pick_falls_through(self):
        near = _FixedBone("Near", (0.0, 0.0, 0.5))
        picker = _picker_with([near])
        assert picker.resolve("mesh-id", ["group-id"], ORIGIN, CAMERA_POS, CAMERA_FWD) == near.id


# ── Tier 3 ────────────────────────────────────────────────────────────

class TestFallback:

    def test_closer_bone_wins_with_equal_angle(self):
        # both on the camera axis (angle 0), listed far-first
        far = _FixedBone("Far", (0.0, 0.0, -2.0))
        near = _FixedBone("Near", (0.0, 0.0, 1.0))
        picker = _picker_with([far, near])
        assert picker.resolve(None, [], ORIGIN, CAMERA_POS, CAMERA_FWD) == near.id

    def test_tie_goes_to_first(self):
        a = _FixedBone("A", (1.0, 0.0, 0.0))
        b = _FixedBone("B", (-1.0, 0.0, 0.0))
        assert _picker_with([a, b]).resolve(None, [], ORIGIN, CAMERA_POS, CAMERA_FWD) == a.id
        assert _picker_with([b, a]).resolve(None, [], ORIGIN, CAMERA_POS, CAMERA_FWD) == b.id

    def test_angle_penalises_off_axis_bone(self):
        # same distance from hit, one on the view axis, one far off it
        hit = vec3(0.0, 0.0, 0.0)
        on_axis = _FixedBone("OnAxis", (0.0, 0.0, -1.0))
        off_axis = _FixedBone("OffAxis", (0.0, 1.0, 0.0))
        picker = _picker_with([off_axis, on_axis])
        assert picker.resolve(None, [], hit, CAMERA_POS, CAMERA_FWD) == on_axis.id

    def test_bone_at_hit_point_wins(self):
        exact = _FixedBone("Exact", (0.5, 0.5, 0.5))
        other = _FixedBone("Other", (0.0, 0.0, 9.0))
        picker = _picker_with([other, exact])
        assert picker.resolve(None, [], vec3(0.5, 0.5, 0.5), CAMERA_POS, CAMERA_FWD) == exact.id

    def test_uses_live_world_position(self):
        _, hips, shoulder, elbow, _ = _arm_rig()
        picker = _picker_with([hips, shoulder, elbow])
        # rotate hips so the arm swings round; the elbow follows
        hips.set_rotation(0.0, np.pi, 0.0)
        elbow_now = elbow.get_world_position()
        np.testing.assert_allclose(elbow_now, [-0.5, 1.5, 0.0], atol=1e-9)
        assert picker.resolve(None, [], elbow_now, CAMERA_POS, CAMERA_FWD) == elbow.id

    def test_empty_bones_returns_none(self):
        picker = _picker_with([])
        assert picker.resolve("anything", ["a", "b"], ORIGIN, CAMERA_POS, CAMERA_FWD) is None
        assert picker.resolve(None, [], ORIGIN, CAMERA_POS, CAMERA_FWD, bones=[]) is None

    def test_explicit_bones_override_registry(self):
        a = _FixedBone("A", (0.0, 0.0, 0.0))
        b = _FixedBone("B", (5.0, 0.0, 0.0))
        picker = _picker_with([a])
        assert picker.resolve(None, [], vec3(5.0, 0.0, 0.0), CAMERA_POS, CAMERA_FWD, bones=[b]) == b.id

    def test_resolve_does_not_mutate(self):
        _, hips, shoulder, elbow, _ = _arm_rig()
        picker = _picker_with([hips, shoulder, elbow])
        before = [b.rotation.copy() for b in (hips, shoulder, elbow)]
        picker.resolve(None, [], ORIGIN, CAMERA_POS, CAMERA_FWD)
        for b, rot in zip((hips, shoulder, elbow), before):
            np.testing.assert_array_equal(b.rotation, rot)


class TestFallbackWeights:

    def test_formula(self):
        positions = np.array([[0.0, 0.0, -2.0], [0.0, 3.0, 10.0 - 3.0]])
        w = fallback_weights(ORIGIN, CAMERA_POS, CAMERA_FWD, positions)
        # first: distance 2, angle 0
        assert w[0] == pytest.approx(0.5)
        # second: direction (0, 3, -3) -> 45 degrees off axis
        dist = np.linalg.norm(positions[1])
        assert w[1] == pytest.approx(1.0 / (dist * (1.0 + np.pi / 4)))

    def test_unnormalised_forward(self):
        positions = np.array([[0.0, 0.0, -2.0]])
        w = fallback_weights(ORIGIN, CAMERA_POS, vec3(0.0, 0.0, -7.0), positions)
        assert w[0] == pytest.approx(0.5)

    def test_bone_at_camera(self):
        positions = np.array([[0.0, 0.0, 10.0]])
        w = fallback_weights(ORIGIN, CAMERA_POS, CAMERA_FWD, positions)
        # zero direction counts as perpendicular
        assert w[0] == pytest.approx(1.0 / (10.0 * (1.0 + np.pi / 2)))

    def test_infinite_at_hit(self):
        w = fallback_weights(ORIGIN, CAMERA_POS, CAMERA_FWD, np.zeros((1, 3)))
        assert np.isinf(w[0])

    def test_empty(self):
        w = fallback_weights(ORIGIN, CAMERA_POS, CAMERA_FWD, np.zeros((0, 3)))
        assert w.shape == (0,)
