"""Build bone hierarchies from rig definitions and discover their bones."""

from __future__ import annotations

import logging
from typing import Any

from skelpose.core.config_loader import load_skeleton_config
from skelpose.core.scene_graph import Bone, SceneNode

logger = logging.getLogger(__name__)


def build_rig(defs: list[dict[str, Any]], name: str = "armature") -> tuple[SceneNode, list[Bone]]:
    """Create a node tree under a new armature group.

    Each definition has ``name`` and optional ``parent`` (name of an
    earlier entry), ``position``, ``rotation`` and ``bone`` (default
    True; False makes a plain node, e.g. a mesh proxy attached to a
    bone).  Entries without a known parent hang off the armature.

    Returns ``(armature, bones)`` with bones in definition order.
    """
    armature = SceneNode(name=name)
    by_name: dict[str, SceneNode] = {}
    bones: list[Bone] = []

    for entry in defs:
        node_name = entry["name"]
        if entry.get("bone", True):
            node: SceneNode = Bone(
                node_name,
                position=entry.get("position"),
                rotation=entry.get("rotation"),
            )
            bones.append(node)
        else:
            node = SceneNode(node_name)
            if entry.get("position") is not None:
                node.set_position(*entry["position"])

        parent_name = entry.get("parent")
        parent = by_name.get(parent_name) if parent_name else None
        if parent_name and parent is None:
            logger.warning("Rig entry %s: parent %s not defined yet, attached to %s",
                           node_name, parent_name, armature.name)
        (parent or armature).add(node)
        by_name.setdefault(node_name, node)

    logger.debug("Built rig %s with %d bones", name, len(bones))
    return armature, bones


def collect_bones(root: SceneNode) -> list[Bone]:
    """Return every ``Bone`` under *root* (inclusive) in depth-first pre-order."""
    bones: list[Bone] = []

    def _collect(node: SceneNode) -> None:
        if isinstance(node, Bone):
            bones.append(node)

    root.traverse(_collect)
    return bones


def load_rig(name: str) -> tuple[SceneNode, list[Bone]]:
    """Build a rig from a definition in assets/config/skeleton/."""
    data = load_skeleton_config(name)
    return build_rig(data["bones"], name=data.get("name", name))
