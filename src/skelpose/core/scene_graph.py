"""Scene graph nodes with Euler-rotation transforms, mirroring Three.js Object3D."""

from __future__ import annotations

import uuid
from typing import Callable, Iterator, Optional

import numpy as np

from skelpose.core.math_utils import (
    Mat4, Vec3,
    as_vec3, mat4_compose, quat_from_euler, vec3,
)


class SceneNode:
    """A node in the scene graph hierarchy.

    position, rotation (XYZ Euler radians), scale -> local matrix.
    World matrix = parent.world_matrix @ local_matrix, computed on demand
    so a rotation edit is visible to the next query without an update pass.
    """

    def __init__(self, name: str = ""):
        self.id: str = uuid.uuid4().hex
        self.name = name
        self.parent: Optional[SceneNode] = None
        self.children: list[SceneNode] = []

        # Transform
        self.position: Vec3 = vec3()
        self.rotation: Vec3 = vec3()
        self.scale: Vec3 = vec3(1, 1, 1)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, id={self.id[:8]})"

    def add(self, child: SceneNode) -> SceneNode:
        """Add a child node. Removes from previous parent if any."""
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        return self

    def remove(self, child: SceneNode) -> SceneNode:
        """Remove a child node."""
        if child in self.children:
            self.children.remove(child)
            child.parent = None
        return self

    def set_position(self, x: float, y: float, z: float) -> SceneNode:
        self.position = vec3(x, y, z)
        return self

    def set_rotation(self, x: float, y: float, z: float) -> SceneNode:
        """Write the Euler rotation in place (array identity is preserved)."""
        self.rotation[:] = (x, y, z)
        return self

    def set_scale(self, x: float, y: float, z: float) -> SceneNode:
        self.scale = vec3(x, y, z)
        return self

    def local_matrix(self) -> Mat4:
        """Compose the local matrix from position, rotation, scale."""
        q = quat_from_euler(*self.rotation)
        return mat4_compose(self.position, q, self.scale)

    def world_matrix(self) -> Mat4:
        """Multiply local matrices from the root down to this node."""
        chain = list(self.iter_ancestors())
        m = np.eye(4, dtype=np.float64)
        for node in reversed(chain):
            m = m @ node.local_matrix()
        return m @ self.local_matrix()

    def get_world_position(self) -> Vec3:
        """Extract world position from a freshly computed world matrix."""
        return self.world_matrix()[:3, 3].copy()

    def iter_ancestors(self) -> Iterator[SceneNode]:
        """Yield parent, grandparent, ... up to the scene root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def traverse(self, callback: Callable[[SceneNode], None]) -> None:
        """Visit this node and all descendants depth-first (pre-order)."""
        stack = [self]
        while stack:
            node = stack.pop()
            callback(node)
            stack.extend(reversed(node.children))

    def find(self, name: str) -> Optional[SceneNode]:
        """Find first descendant (pre-order) with given name."""
        found: list[SceneNode] = []

        def _match(node: SceneNode) -> None:
            if not found and node.name == name:
                found.append(node)

        self.traverse(_match)
        return found[0] if found else None


class Bone(SceneNode):
    """A skeleton joint.

    Loaders create ``Bone`` for joints and plain ``SceneNode`` for
    everything else (armature groups, meshes attached to bones).
    """

    def __init__(self, name: str = "", position=None, rotation=None):
        super().__init__(name=name)
        if position is not None:
            self.position = as_vec3(position)
        if rotation is not None:
            self.rotation = as_vec3(rotation)


class Scene(SceneNode):
    """Root scene node."""

    def __init__(self):
        super().__init__(name="scene")
