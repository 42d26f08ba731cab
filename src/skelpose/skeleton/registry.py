"""Registry owning the currently loaded skeleton.

Holds the bone list with id/name lookups, a flat ``id -> parent id``
index for hierarchy walks, the original-rotation snapshot taken at load
time, the bone groups, and the per-bone rotation constraint overrides.
``load()`` replaces all of these together.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Iterator, Optional, Sequence

from skelpose.skeleton.classifier import BoneClassifier, GroupName, empty_groups

logger = logging.getLogger(__name__)

Rotation = tuple[float, float, float]


class BoneRegistry:
    """Bones of one loaded model plus everything derived from them."""

    def __init__(self, classifier: Optional[BoneClassifier] = None) -> None:
        self.classifier = classifier or BoneClassifier()
        self._bones: list = []
        self._by_id: dict[str, Any] = {}
        self._parent_index: dict[str, Optional[str]] = {}
        self._child_index: dict[str, list[str]] = {}
        self._snapshot: dict[str, Rotation] = {}
        self._groups: dict[GroupName, list[str]] = empty_groups()
        # bone id -> axis -> RotationConstraint, filled lazily
        self.constraint_overrides: dict[str, dict[str, Any]] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, nodes: Sequence) -> None:
        """Replace the current skeleton with *nodes*.

        Snapshot, groups and constraint overrides from any previous load
        are discarded.  An empty sequence leaves a valid empty registry.
        """
        bones = list(nodes)
        by_id: dict[str, Any] = {}
        for bone in bones:
            if bone.id in by_id:
                logger.warning("Duplicate bone id %s (%s) ignored", bone.id, bone.name)
                continue
            by_id[bone.id] = bone
        bones = list(by_id.values())

        parent_index: dict[str, Optional[str]] = {}
        child_index: dict[str, list[str]] = {bone_id: [] for bone_id in by_id}
        for bone in bones:
            parent_id = getattr(bone.parent, "id", None)
            if parent_id not in by_id:
                parent_id = None
            parent_index[bone.id] = parent_id
            if parent_id is not None:
                child_index[parent_id].append(bone.id)

        snapshot = {
            bone.id: (float(bone.rotation[0]), float(bone.rotation[1]), float(bone.rotation[2]))
            for bone in bones
        }
        groups = self.classifier.classify(bones)

        self._bones = bones
        self._by_id = by_id
        self._parent_index = parent_index
        self._child_index = child_index
        self._snapshot = snapshot
        self._groups = groups
        self.constraint_overrides = {}

        if bones:
            logger.info("%d bones loaded", len(bones))
        else:
            logger.info("Empty skeleton loaded")

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def bones(self) -> list:
        """Bones in discovery order."""
        return list(self._bones)

    @property
    def groups(self) -> dict[GroupName, list[str]]:
        return {group: list(ids) for group, ids in self._groups.items()}

    @property
    def original_rotations(self) -> dict[str, Rotation]:
        """Copy of the rotations captured at load time."""
        return dict(self._snapshot)

    def __len__(self) -> int:
        return len(self._bones)

    def __contains__(self, bone_id: object) -> bool:
        return bone_id in self._by_id

    def find_by_id(self, bone_id: str):
        return self._by_id.get(bone_id)

    def find_by_name(self, name: str):
        """Return the first bone (discovery order) named exactly *name*."""
        for bone in self._bones:
            if bone.name == name:
                return bone
        return None

    def group_of(self, bone_id: str) -> Optional[GroupName]:
        for group, ids in self._groups.items():
            if bone_id in ids:
                return group
        return None

    # ------------------------------------------------------------------
    # Hierarchy
    # ------------------------------------------------------------------

    def parent_id(self, bone_id: str) -> Optional[str]:
        """Parent bone id, or None for roots and unknown ids."""
        return self._parent_index.get(bone_id)

    def roots(self) -> list[str]:
        """Bones with no loaded parent bone.  Used for walks, not grouping."""
        return [bone.id for bone in self._bones if self._parent_index[bone.id] is None]

    def ancestors(self, bone_id: str) -> Iterator[str]:
        """Yield parent bone ids from nearest to farthest."""
        seen = {bone_id}
        current = self._parent_index.get(bone_id)
        while current is not None and current not in seen:
            seen.add(current)
            yield current
            current = self._parent_index.get(current)

    def descendants(self, bone_id: str) -> list[str]:
        """Breadth-first list of all bones below *bone_id*."""
        result: list[str] = []
        queue = deque(self._child_index.get(bone_id, ()))
        seen = {bone_id}
        while queue:
            child = queue.popleft()
            if child in seen:
                continue
            seen.add(child)
            result.append(child)
            queue.extend(self._child_index.get(child, ()))
        return result

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset_one(self, bone_id: str) -> bool:
        """Restore one bone's original rotation.  False if unknown."""
        bone = self._by_id.get(bone_id)
        original = self._snapshot.get(bone_id)
        if bone is None or original is None:
            logger.debug("Reset skipped, bone not found: %s", bone_id)
            return False
        bone.rotation[0], bone.rotation[1], bone.rotation[2] = original
        return True

    def reset_all(self) -> int:
        """Restore every bone.  Returns how many were reset."""
        count = 0
        for bone in self._bones:
            if self.reset_one(bone.id):
                count += 1
        return count
