"""Orthographic camera producing a view-projection matrix."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

_DEPTH = float(0xFFFF)


def _translation(v) -> np.ndarray:
    m = np.eye(4)
    m[:3, 3] = v
    return m


def _rotation_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    m = np.eye(4)
    m[0, 0], m[0, 1] = c, -s
    m[1, 0], m[1, 1] = s, c
    return m


def _orthographic_lh(left, right, bottom, top, near, far) -> np.ndarray:
    rcp_width = 1.0 / (right - left)
    rcp_height = 1.0 / (top - bottom)
    r = 1.0 / (far - near)
    return np.array(
        [
            [2.0 * rcp_width, 0.0, 0.0, -(left + right) * rcp_width],
            [0.0, 2.0 * rcp_height, 0.0, -(top + bottom) * rcp_height],
            [0.0, 0.0, r, -r * near],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


@dataclass
class Camera:
    """A 2D camera with position, rotation and per-axis zoom."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(2))
    rotation: float = 0.0
    scale: np.ndarray = field(default_factory=lambda: np.ones(2))

    def __post_init__(self) -> None:
        self.position = np.array(self.position, dtype=float)
        self.scale = np.array(self.scale, dtype=float)
        self.rotation = float(self.rotation)

    def real_size(self, viewport) -> np.ndarray:
        """The size of the viewport in world units."""
        return np.asarray(viewport, dtype=float) / self.scale

    def center_offset(self, viewport) -> np.ndarray:
        """Half of the real size of the viewport."""
        return self.real_size(viewport) / 2.0

    def matrix(self, viewport) -> np.ndarray:
        """The 4x4 view-projection matrix for the given viewport size."""
        real_size = self.real_size(viewport)
        origin = real_size / 2.0
        pos = np.array([self.position[0], self.position[1], -(_DEPTH / 2.0)])
        return (
            _orthographic_lh(0.0, real_size[0], real_size[1], 0.0, 0.0, _DEPTH)
            @ _translation([origin[0], origin[1], 0.0])
            @ _rotation_z(self.rotation)
            @ _translation(pos)
        )