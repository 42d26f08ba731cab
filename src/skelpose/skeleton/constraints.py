"""Per-bone, per-axis rotation limits enforced by clamping.

Every axis of every bone starts at ``[-pi, pi]``.  Overrides are stored in
the registry so a new skeleton load drops them with everything else.
Rotation writes are clamped into range, never rejected.  Resetting to
the original pose writes the load-time snapshot as-is.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

from skelpose import constants
from skelpose.constants import AXES, AXIS_INDEX
from skelpose.core.config_loader import load_config
from skelpose.core.math_utils import clamp
from skelpose.skeleton.status import Status

logger = logging.getLogger(__name__)


class InvalidRangeError(ValueError):
    """A rotation range whose min is not strictly below its max."""


@dataclass(frozen=True)
class RotationConstraint:
    """Closed rotation interval in radians."""
    min: float = constants.DEFAULT_ROTATION_MIN
    max: float = constants.DEFAULT_ROTATION_MAX

    def __post_init__(self) -> None:
        if not (math.isfinite(self.min) and math.isfinite(self.max)):
            raise InvalidRangeError(f"Non-finite rotation range [{self.min}, {self.max}]")
        if self.min >= self.max:
            raise InvalidRangeError(f"Rotation min {self.min} must be below max {self.max}")

    def clamp(self, value: float) -> float:
        return clamp(value, self.min, self.max)

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


DEFAULT_CONSTRAINT = RotationConstraint()


def _check_axis(axis: str) -> int:
    try:
        return AXIS_INDEX[axis]
    except KeyError:
        raise ValueError(f"Unknown rotation axis {axis!r}, expected one of {AXES}") from None


class RotationConstraintManager:
    """Clamp-based rotation limits over the bones of a ``BoneRegistry``."""

    def __init__(self, registry) -> None:
        self.registry = registry

    # ------------------------------------------------------------------
    # Limits
    # ------------------------------------------------------------------

    def get_constraint(self, bone_id: str, axis: str) -> Optional[RotationConstraint]:
        """Override for *axis* if set, else the default.  None if unknown."""
        _check_axis(axis)
        if bone_id not in self.registry:
            return None
        return self.registry.constraint_overrides.get(bone_id, {}).get(axis, DEFAULT_CONSTRAINT)

    def get_constraints(self, bone_id: str) -> Optional[dict[str, RotationConstraint]]:
        """All three axes for one bone.  None if unknown."""
        if bone_id not in self.registry:
            return None
        return {axis: self.get_constraint(bone_id, axis) for axis in AXES}

    def set_constraint(self, bone_id: str, axis: str, lo: float, hi: float) -> Status:
        """Store ``[lo, hi]`` for *axis* and pull the current rotation into it.

        Returns ``Status.INVALID_RANGE`` without touching the existing
        bounds when ``lo >= hi``.
        """
        index = _check_axis(axis)
        bone = self.registry.find_by_id(bone_id)
        if bone is None:
            logger.debug("Constraint skipped, bone not found: %s", bone_id)
            return Status.NOT_FOUND

        try:
            constraint = RotationConstraint(float(lo), float(hi))
        except InvalidRangeError as e:
            logger.warning("Rejected limits for %s.%s: %s", bone.name, axis, e)
            return Status.INVALID_RANGE

        self.registry.constraint_overrides.setdefault(bone_id, {})[axis] = constraint
        current = float(bone.rotation[index])
        if not constraint.contains(current):
            bone.rotation[index] = constraint.clamp(current)
        return Status.OK

    def clear_constraint(self, bone_id: str, axis: Optional[str] = None) -> Status:
        """Drop the override for one axis, or all axes when *axis* is None."""
        if axis is not None:
            _check_axis(axis)
        if bone_id not in self.registry:
            return Status.NOT_FOUND
        overrides = self.registry.constraint_overrides.get(bone_id)
        if overrides is not None:
            if axis is None:
                overrides.clear()
            else:
                overrides.pop(axis, None)
            if not overrides:
                del self.registry.constraint_overrides[bone_id]
        return Status.OK

    # ------------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------------

    def set_rotation(self, bone_id: str, axis: str, value: float) -> Status:
        """Write *value* (clamped into the axis range) into the bone rotation."""
        index = _check_axis(axis)
        bone = self.registry.find_by_id(bone_id)
        if bone is None:
            logger.debug("Rotation skipped, bone not found: %s", bone_id)
            return Status.NOT_FOUND
        bone.rotation[index] = self.get_constraint(bone_id, axis).clamp(float(value))
        return Status.OK

    def set_rotations(
        self,
        bone_id: str,
        x: Optional[float] = None,
        y: Optional[float] = None,
        z: Optional[float] = None,
    ) -> Status:
        """Clamp-write any of the given axes; omitted axes keep their value."""
        if bone_id not in self.registry:
            return Status.NOT_FOUND
        for axis, value in zip(AXES, (x, y, z)):
            if value is not None:
                self.set_rotation(bone_id, axis, value)
        return Status.OK

    def reset_to_original(self, bone_id: str) -> Status:
        """Restore the load-time rotation, bypassing the active limits."""
        if self.registry.reset_one(bone_id):
            return Status.OK
        return Status.NOT_FOUND

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    def apply_presets(self, limits: dict[str, Any]) -> int:
        """Apply limits keyed by bone name.  Returns how many axes were set.

        ``{s}`` in a key expands to ``Left`` and ``Right``.  Every bone
        with a matching name receives the limits.
        """
        if not isinstance(limits, dict):
            logger.warning("Rotation limits must be an object keyed by bone name, got %s",
                           type(limits).__name__)
            return 0

        expanded: dict[str, dict[str, Any]] = {}
        for key, axes in limits.items():
            if "{s}" in key:
                for side in ("Left", "Right"):
                    expanded[key.replace("{s}", side)] = axes
            else:
                expanded[key] = axes

        applied = 0
        for bone in self.registry.bones:
            axes = expanded.get(bone.name)
            if not axes:
                continue
            if not isinstance(axes, dict):
                logger.warning("Preset for %s is not an object, skipped", bone.name)
                continue
            for axis, bounds in axes.items():
                if axis not in AXIS_INDEX:
                    logger.warning("Preset for %s has unknown axis %r", bone.name, axis)
                    continue
                if not isinstance(bounds, dict):
                    logger.warning("Preset %s.%s is not a {min, max} object, skipped",
                                   bone.name, axis)
                    continue
                try:
                    lo = float(bounds.get("min", constants.DEFAULT_ROTATION_MIN))
                    hi = float(bounds.get("max", constants.DEFAULT_ROTATION_MAX))
                except (TypeError, ValueError):
                    logger.warning("Preset %s.%s has non-numeric bounds, skipped",
                                   bone.name, axis)
                    continue
                if self.set_constraint(bone.id, axis, lo, hi) is Status.OK:
                    applied += 1
        return applied

    def load_presets(self, name: str = constants.ROTATION_LIMITS_CONFIG) -> int:
        """Apply limits from assets/config/.  Graceful no-op on failure."""
        try:
            data = load_config(name)
        except (FileNotFoundError, ValueError) as e:
            logger.warning("Rotation limits config not found, presets skipped: %s", e)
            return 0
        if not isinstance(data, dict):
            logger.warning("Rotation limits config %s is not an object, presets skipped", name)
            return 0
        return self.apply_presets(data.get("limits", {}))
