"""Posing session: one loaded skeleton, its selection, and change events."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from skelpose.constants import AXIS_INDEX
from skelpose.core.camera import Camera
from skelpose.core.events import EventBus, EventType
from skelpose.core.math_utils import Vec3
from skelpose.skeleton.classifier import BoneClassifier, GroupName
from skelpose.skeleton.constraints import RotationConstraintManager
from skelpose.skeleton.picker import BonePicker, ancestor_chain
from skelpose.skeleton.registry import BoneRegistry
from skelpose.skeleton.status import Status

logger = logging.getLogger(__name__)


class PoseSession:
    """Caller-owned context wiring registry, picker and limits to an EventBus.

    Presentation layers subscribe to the bus to rebuild controls on
    ``SKELETON_LOADED``, highlight on ``SELECTION_CHANGED`` and refresh
    sliders on ``BONE_ROTATED`` / ``ROTATION_LIMITS_CHANGED`` / ``POSE_RESET``.
    """

    def __init__(
        self,
        events: Optional[EventBus] = None,
        classifier: Optional[BoneClassifier] = None,
    ) -> None:
        self.events = events or EventBus()
        self.registry = BoneRegistry(classifier)
        self.picker = BonePicker(self.registry)
        self.constraints = RotationConstraintManager(self.registry)
        self.selected_id: Optional[str] = None

    @property
    def groups(self) -> dict[GroupName, list[str]]:
        return self.registry.groups

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, nodes: Sequence) -> None:
        """Replace the skeleton and clear the selection."""
        self.registry.load(nodes)
        self.selected_id = None
        self.events.publish(
            EventType.SKELETON_LOADED,
            bone_count=len(self.registry),
            groups=self.registry.groups,
        )

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def pick(
        self,
        picked_id: Optional[str],
        ancestor_ids: Sequence[str],
        hit_point: Vec3,
        camera: Camera,
    ) -> Optional[str]:
        """Resolve a pick and select the result.  Returns the bone id."""
        bone_id = self.picker.resolve(
            picked_id, ancestor_ids, hit_point, camera.position, camera.forward,
        )
        if bone_id is not None:
            self._set_selection(bone_id)
        return bone_id

    def pick_node(self, node, hit_point: Vec3, camera: Camera) -> Optional[str]:
        """Pick from a hit scene node (or None when nothing was hit)."""
        if node is None:
            return self.pick(None, [], hit_point, camera)
        return self.pick(node.id, ancestor_chain(node), hit_point, camera)

    def select(self, bone_id: str) -> bool:
        """Select a bone directly (e.g. from its control label)."""
        if bone_id not in self.registry:
            logger.debug("Select ignored, bone not found: %s", bone_id)
            return False
        self._set_selection(bone_id)
        return True

    def _set_selection(self, bone_id: str) -> None:
        if bone_id == self.selected_id:
            return
        previous = self.selected_id
        self.selected_id = bone_id
        self.events.publish(EventType.SELECTION_CHANGED, bone_id=bone_id, previous_id=previous)

    # ------------------------------------------------------------------
    # Posing
    # ------------------------------------------------------------------

    def set_rotation(self, bone_id: str, axis: str, value: float) -> Status:
        status = self.constraints.set_rotation(bone_id, axis, value)
        if status is Status.OK:
            bone = self.registry.find_by_id(bone_id)
            self.events.publish(
                EventType.BONE_ROTATED,
                bone_id=bone_id, axis=axis, value=float(bone.rotation[AXIS_INDEX[axis]]),
            )
        return status

    def set_constraint(self, bone_id: str, axis: str, lo: float, hi: float) -> Status:
        status = self.constraints.set_constraint(bone_id, axis, lo, hi)
        if status is Status.OK:
            self.events.publish(
                EventType.ROTATION_LIMITS_CHANGED,
                bone_id=bone_id, limits=self.constraints.get_constraints(bone_id),
            )
        return status

    def reset_bone(self, bone_id: str) -> Status:
        status = self.constraints.reset_to_original(bone_id)
        if status is Status.OK:
            self.events.publish(EventType.POSE_RESET, bone_ids=[bone_id])
        return status

    def reset_all(self) -> int:
        count = self.registry.reset_all()
        if count:
            self.events.publish(
                EventType.POSE_RESET, bone_ids=[bone.id for bone in self.registry.bones],
            )
        return count
