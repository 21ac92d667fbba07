"""Relative node transforms."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np


def _rot_x(a: float) -> np.ndarray:
    c, s = math.cos(a), math.sin(a)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def _rot_y(a: float) -> np.ndarray:
    c, s = math.cos(a), math.sin(a)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def _rot_z(a: float) -> np.ndarray:
    c, s = math.cos(a), math.sin(a)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


@dataclass(eq=False)
class TransformOffset:
    """Translation, Euler rotation (XYZ) and 2D scale relative to a parent."""

    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    scale: np.ndarray = field(default_factory=lambda: np.ones(2))
    pixel_snap: bool = False

    def __post_init__(self) -> None:
        self.translation = np.array(self.translation, dtype=float)
        self.rotation = np.array(self.rotation, dtype=float)
        self.scale = np.array(self.scale, dtype=float)

    def to_matrix(self) -> np.ndarray:
        """The 4x4 matrix translation @ rotation @ scale."""
        translation = np.eye(4)
        translation[:3, 3] = self.translation
        rotation = np.eye(4)
        rx, ry, rz = self.rotation
        rotation[:3, :3] = _rot_x(rx) @ _rot_y(ry) @ _rot_z(rz)
        scale = np.diag([self.scale[0], self.scale[1], 1.0, 1.0])
        return translation @ rotation @ scale