"""Shared constants and paths for SkelPose."""

import math
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
ASSETS_DIR = PROJECT_ROOT / "assets"
CONFIG_DIR = ASSETS_DIR / "config"
SKELETON_CONFIG_DIR = CONFIG_DIR / "skeleton"

VOCABULARY_CONFIG = "bone_vocabulary.json"
ROTATION_LIMITS_CONFIG = "bone_rotation_limits.json"

# Rotation axes, in Euler XYZ order
AXES = ("x", "y", "z")
AXIS_INDEX = {axis: i for i, axis in enumerate(AXES)}

# Default per-axis rotation bounds (radians)
DEFAULT_ROTATION_MIN = -math.pi
DEFAULT_ROTATION_MAX = math.pi

# Default classification vocabulary (lower-case substrings)
ROOT_WORDS = ("root", "hip", "pelvis", "becken")
HEAD_WORDS = ("head", "skull", "neck", "kopf")
TORSO_WORDS = ("spine", "chest", "rib", "torso", "pelvis", "hip", "brust", "bauch")
ARM_WORDS = ("arm", "shoulder", "elbow", "wrist", "schulter")
HAND_WORDS = ("hand", "finger", "thumb", "pinky", "index", "middle", "ring")
LEG_WORDS = ("leg", "thigh", "knee", "shin", "bein", "schenkel")
FOOT_WORDS = ("foot", "toe", "ankle", "fuss")

# Side markers, scanned in this order; first hit decides the side
SIDE_MARKERS = (
    ("left", "Left"),
    ("l_", "Left"),
    ("_l", "Left"),
    ("right", "Right"),
    ("r_", "Right"),
    ("_r", "Right"),
)

# Camera defaults (full body view, model units ~ metres)
DEFAULT_CAMERA_POS = (0.0, 1.0, 3.0)
DEFAULT_CAMERA_TARGET = (0.0, 1.0, 0.0)
