"""Print the bone hierarchy and group table of a rig definition.

Usage:
    python tools/inspect_rig.py                       # bundled humanoid rig
    python tools/inspect_rig.py path/to/rig.json --limits
"""

import logging
import sys
from pathlib import Path

sys.path.insert(0, "src")

from skelpose.core.config_loader import load_json
from skelpose.core.scene_graph import Bone, SceneNode
from skelpose.skeleton.classifier import GROUP_LABELS, BoneVocabulary, BoneClassifier
from skelpose.skeleton.constraints import RotationConstraintManager
from skelpose.skeleton.registry import BoneRegistry
from skelpose.skeleton.rig_builder import build_rig, collect_bones, load_rig


def print_tree(root: SceneNode) -> None:
    """Indented hierarchy dump, one node per line."""
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        kind = "Bone" if isinstance(node, Bone) else "Node"
        pos = node.get_world_position()
        print(f"{'  ' * depth}{node.name or 'unnamed'} [{kind}] "
              f"({pos[0]:6.3f},{pos[1]:6.3f},{pos[2]:6.3f})  {node.id[:8]}")
        stack.extend((child, depth + 1) for child in reversed(node.children))


def main():
    import argparse
    parser = argparse.ArgumentParser(description="Inspect bone grouping of a rig definition")
    parser.add_argument("rig", nargs="?", default=None,
                        help="Rig JSON file (default: bundled humanoid_rig.json)")
    parser.add_argument("--limits", action="store_true",
                        help="Apply bone_rotation_limits.json and list resulting limits")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(name)s: %(message)s")

    if args.rig is None:
        root, _ = load_rig("humanoid_rig.json")
    else:
        data = load_json(Path(args.rig))
        root, _ = build_rig(data["bones"], name=data.get("name", Path(args.rig).stem))

    registry = BoneRegistry(BoneClassifier(BoneVocabulary.from_config()))
    registry.load(collect_bones(root))

    print("HIERARCHY:")
    print_tree(root)

    print(f"\nGROUPS ({len(registry)} bones):")
    for group, ids in registry.groups.items():
        if not ids:
            continue
        names = ", ".join(registry.find_by_id(i).name for i in ids)
        print(f"  {GROUP_LABELS[group]:22s} {len(ids):3d}  {names}")

    if args.limits:
        constraints = RotationConstraintManager(registry)
        applied = constraints.load_presets()
        print(f"\nLIMITS ({applied} axes from presets):")
        for bone_id, axes in registry.constraint_overrides.items():
            name = registry.find_by_id(bone_id).name
            for axis, c in sorted(axes.items()):
                print(f"  {name:22s} {axis}  [{c.min:6.2f}, {c.max:6.2f}]")


if __name__ == "__main__":
    main()
