"""Anatomical grouping of skeleton bones by name and hierarchy.

Bone names from real rigs are loosely structured (``mixamorig:LeftHand``,
``Bip01 L Thigh``, ``upperarm_r``, ``Kopf``), so grouping is a sequence of
substring tests against small word lists, evaluated in a fixed precedence:

1. Root  -- node with no parent, or a root word (root, hip, pelvis, ...)
2. Head  -- head words
3. Torso -- torso words
4. Side + part -- a side marker, then arm / hand / leg / foot words,
   falling back to the side's Generic bucket
5. Other

``hip`` and ``pelvis`` are both root and torso words; Root is tested first
so such bones always land in Root.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Sequence

from skelpose import constants
from skelpose.core.config_loader import load_config

logger = logging.getLogger(__name__)


class GroupName(Enum):
    """Fixed set of bone groups, in presentation order."""
    ROOT = "Root"
    HEAD = "Head"
    TORSO = "Torso"
    LEFT_ARM = "LeftArm"
    RIGHT_ARM = "RightArm"
    LEFT_HAND = "LeftHand"
    RIGHT_HAND = "RightHand"
    LEFT_LEG = "LeftLeg"
    RIGHT_LEG = "RightLeg"
    LEFT_FOOT = "LeftFoot"
    RIGHT_FOOT = "RightFoot"
    LEFT_GENERIC = "LeftGeneric"
    RIGHT_GENERIC = "RightGeneric"
    OTHER = "Other"


# Human-readable titles for control panels
GROUP_LABELS = {
    GroupName.ROOT: "Root / Hips",
    GroupName.HEAD: "Head",
    GroupName.TORSO: "Torso",
    GroupName.LEFT_ARM: "Left Arm",
    GroupName.RIGHT_ARM: "Right Arm",
    GroupName.LEFT_HAND: "Left Hand / Fingers",
    GroupName.RIGHT_HAND: "Right Hand / Fingers",
    GroupName.LEFT_LEG: "Left Leg",
    GroupName.RIGHT_LEG: "Right Leg",
    GroupName.LEFT_FOOT: "Left Foot / Toes",
    GroupName.RIGHT_FOOT: "Right Foot / Toes",
    GroupName.LEFT_GENERIC: "Left",
    GroupName.RIGHT_GENERIC: "Right",
    GroupName.OTHER: "Other",
}

# (side, part) -> group; part None is the side's generic bucket
_SIDED_GROUPS = {
    ("Left", "arm"): GroupName.LEFT_ARM,
    ("Right", "arm"): GroupName.RIGHT_ARM,
    ("Left", "hand"): GroupName.LEFT_HAND,
    ("Right", "hand"): GroupName.RIGHT_HAND,
    ("Left", "leg"): GroupName.LEFT_LEG,
    ("Right", "leg"): GroupName.RIGHT_LEG,
    ("Left", "foot"): GroupName.LEFT_FOOT,
    ("Right", "foot"): GroupName.RIGHT_FOOT,
    ("Left", None): GroupName.LEFT_GENERIC,
    ("Right", None): GroupName.RIGHT_GENERIC,
}


def empty_groups() -> dict[GroupName, list[str]]:
    """Return a mapping with every group present and empty."""
    return {group: [] for group in GroupName}


def _contains_any(name: str, words: Iterable[str]) -> bool:
    return any(word in name for word in words)


@dataclass(frozen=True)
class BoneVocabulary:
    """Lower-case word lists driving classification."""
    root: tuple[str, ...] = constants.ROOT_WORDS
    head: tuple[str, ...] = constants.HEAD_WORDS
    torso: tuple[str, ...] = constants.TORSO_WORDS
    arm: tuple[str, ...] = constants.ARM_WORDS
    hand: tuple[str, ...] = constants.HAND_WORDS
    leg: tuple[str, ...] = constants.LEG_WORDS
    foot: tuple[str, ...] = constants.FOOT_WORDS
    side_markers: tuple[tuple[str, str], ...] = constants.SIDE_MARKERS

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BoneVocabulary:
        """Build a vocabulary from a config dict; missing keys keep defaults.

        Side markers are given as ``left_markers`` / ``right_markers``
        lists; all left markers are scanned before any right marker.
        """
        kwargs: dict[str, Any] = {}
        for key in ("root", "head", "torso", "arm", "hand", "leg", "foot"):
            if key in data:
                kwargs[key] = tuple(str(w).lower() for w in data[key])

        if "left_markers" in data or "right_markers" in data:
            default = cls()
            left = data.get("left_markers")
            right = data.get("right_markers")
            if left is None:
                left = [m for m, side in default.side_markers if side == "Left"]
            if right is None:
                right = [m for m, side in default.side_markers if side == "Right"]
            kwargs["side_markers"] = tuple(
                [(str(m).lower(), "Left") for m in left]
                + [(str(m).lower(), "Right") for m in right]
            )
        return cls(**kwargs)

    @classmethod
    def from_config(cls, name: str = constants.VOCABULARY_CONFIG) -> BoneVocabulary:
        """Load vocabulary overrides from assets/config/.  Defaults on failure."""
        try:
            data = load_config(name)
        except (FileNotFoundError, ValueError) as e:
            logger.warning("Bone vocabulary config %s unavailable, using defaults: %s", name, e)
            return cls()
        if not isinstance(data, dict):
            logger.warning("Bone vocabulary config %s is not an object, using defaults", name)
            return cls()
        return cls.from_dict(data)


class BoneClassifier:
    """Assign every bone of a skeleton to exactly one ``GroupName``."""

    def __init__(self, vocabulary: Optional[BoneVocabulary] = None):
        self.vocabulary = vocabulary or BoneVocabulary()

    def classify_name(self, name: str, is_root: bool = False) -> GroupName:
        """Classify a single bone name.  *is_root* marks a hierarchy root."""
        vocab = self.vocabulary
        lower = name.lower()

        if is_root or _contains_any(lower, vocab.root):
            return GroupName.ROOT
        if _contains_any(lower, vocab.head):
            return GroupName.HEAD
        if _contains_any(lower, vocab.torso):
            return GroupName.TORSO

        side = self.side_of(lower)
        if side is None:
            return GroupName.OTHER

        part = None
        for part_name, words in (
            ("arm", vocab.arm),
            ("hand", vocab.hand),
            ("leg", vocab.leg),
            ("foot", vocab.foot),
        ):
            if _contains_any(lower, words):
                part = part_name
                break
        return _SIDED_GROUPS[(side, part)]

    def side_of(self, name: str) -> Optional[str]:
        """Return ``"Left"``, ``"Right"`` or None from the first matching marker."""
        lower = name.lower()
        for marker, side in self.vocabulary.side_markers:
            if marker in lower:
                return side
        return None

    def classify(self, nodes: Sequence) -> dict[GroupName, list[str]]:
        """Group *nodes* by anatomy.  Returns ``GroupName -> [bone id]``.

        A node with no parent at all is a hierarchy root.  Ids keep their
        input order within each group.
        """
        groups = empty_groups()

        for node in nodes:
            is_root = node.parent is None
            groups[self.classify_name(node.name, is_root=is_root)].append(node.id)

        for group, members in groups.items():
            if members:
                logger.debug("Group %s: %d bones", group.value, len(members))
        return groups
