"""Skeleton core -- bone registry, grouping, picking and rotation limits."""

from skelpose.skeleton.classifier import BoneClassifier, BoneVocabulary, GroupName, GROUP_LABELS
from skelpose.skeleton.constraints import (
    InvalidRangeError,
    RotationConstraint,
    RotationConstraintManager,
)
from skelpose.skeleton.picker import BonePicker, ancestor_chain
from skelpose.skeleton.registry import BoneRegistry
from skelpose.skeleton.rig_builder import build_rig, collect_bones, load_rig
from skelpose.skeleton.status import Status

__all__ = [
    "BoneClassifier",
    "BonePicker",
    "BoneRegistry",
    "BoneVocabulary",
    "GROUP_LABELS",
    "GroupName",
    "InvalidRangeError",
    "RotationConstraint",
    "RotationConstraintManager",
    "Status",
    "ancestor_chain",
    "build_rig",
    "collect_bones",
    "load_rig",
]
