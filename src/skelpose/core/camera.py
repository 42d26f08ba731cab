"""Viewer camera as seen by the picker: where it is and where it looks."""

from typing import Optional

import numpy as np

from skelpose.core.math_utils import Vec3, as_vec3, normalize
from skelpose.constants import DEFAULT_CAMERA_POS, DEFAULT_CAMERA_TARGET


class Camera:
    """Position and look-at target of the viewer.

    The host renderer owns projection and raycasting; the pick fallback
    only needs the eye position and the unit view direction.
    """

    def __init__(
        self,
        position: Optional[Vec3] = None,
        target: Optional[Vec3] = None,
    ) -> None:
        self.position: Vec3 = as_vec3(DEFAULT_CAMERA_POS if position is None else position)
        self.target: Vec3 = as_vec3(DEFAULT_CAMERA_TARGET if target is None else target)

    @property
    def forward(self) -> Vec3:
        """Unit vector from the camera position towards its target."""
        return normalize(self.target - self.position)

    def look_at(self, eye: Vec3, target: Vec3) -> None:
        self.position = np.asarray(eye, dtype=np.float64).copy()
        self.target = np.asarray(target, dtype=np.float64).copy()
