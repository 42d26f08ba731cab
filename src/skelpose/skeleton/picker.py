"""Resolve a 3D pick to the bone the user most likely meant.

Resolution runs in three tiers and stops at the first that yields a bone:

1. the picked object is itself a bone;
2. the nearest bone among the picked object's ancestors (meshes and
   helpers parented under a bone);
3. a weighted nearest-bone search around the hit point, favouring bones
   close to the hit and close to the camera's line of sight::

       weight = 1 / (distance * (1 + angle))

The picker only computes an id.  Highlighting, and ignoring a pick that
resolves to the already-selected bone, belong to the caller.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from skelpose.core.math_utils import Vec3, normalize

logger = logging.getLogger(__name__)


def ancestor_chain(node) -> list[str]:
    """Ids of *node*'s ancestors, nearest first, up to the scene root."""
    chain: list[str] = []
    seen = {id(node)}
    current = getattr(node, "parent", None)
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        chain.append(current.id)
        current = getattr(current, "parent", None)
    return chain


def fallback_weights(
    hit_point: Vec3,
    camera_position: Vec3,
    camera_forward: Vec3,
    positions: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Per-bone pick weights for bone world *positions* of shape (N, 3).

    A bone lying exactly on the hit point gets an infinite weight.
    """
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    if len(positions) == 0:
        return np.zeros(0, dtype=np.float64)

    hit = np.asarray(hit_point, dtype=np.float64)
    cam = np.asarray(camera_position, dtype=np.float64)
    forward = normalize(np.asarray(camera_forward, dtype=np.float64))

    distance = np.linalg.norm(positions - hit, axis=1)

    to_bone = positions - cam
    lengths = np.linalg.norm(to_bone, axis=1)
    directions = np.zeros_like(to_bone)
    nonzero = lengths > 1e-10
    directions[nonzero] = to_bone[nonzero] / lengths[nonzero, np.newaxis]
    angle = np.arccos(np.clip(directions @ forward, -1.0, 1.0))

    with np.errstate(divide="ignore"):
        return 1.0 / (distance * (1.0 + angle))


class BonePicker:
    """Three-tier bone resolution against a ``BoneRegistry``."""

    def __init__(self, registry) -> None:
        self.registry = registry

    def resolve(
        self,
        picked_id: Optional[str],
        ancestor_ids: Iterable[str],
        hit_point: Vec3,
        camera_position: Vec3,
        camera_forward: Vec3,
        bones: Optional[Sequence] = None,
    ) -> Optional[str]:
        """Return the id of the intended bone, or None when there are no bones.

        *bones* defaults to the registry's current skeleton.
        """
        if bones is None:
            bones = self.registry.bones
        if not bones:
            return None

        bone_ids = {bone.id for bone in bones}

        if picked_id is not None and picked_id in bone_ids:
            logger.debug("Pick resolved directly: %s", picked_id)
            return picked_id

        for ancestor_id in ancestor_ids:
            if ancestor_id in bone_ids:
                logger.debug("Pick resolved via ancestor: %s", ancestor_id)
                return ancestor_id

        return self.nearest_bone(hit_point, camera_position, camera_forward, bones)

    def nearest_bone(
        self,
        hit_point: Vec3,
        camera_position: Vec3,
        camera_forward: Vec3,
        bones: Sequence,
    ) -> Optional[str]:
        """Highest-weight bone; ties go to the earliest bone in *bones*."""
        if not bones:
            return None
        positions = np.array([bone.get_world_position() for bone in bones], dtype=np.float64)
        weights = fallback_weights(hit_point, camera_position, camera_forward, positions)
        best = int(np.argmax(weights))
        logger.debug(
            "Pick resolved by proximity: %s (weight %.4g)", bones[best].name, weights[best],
        )
        return bones[best].id
