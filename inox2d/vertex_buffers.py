"""Compact vertex data shared by all meshes of a puppet."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .components import Mesh

_U16_MAX = 0xFFFF


def _quad_verts() -> np.ndarray:
    return np.array([[-1.0, -1.0], [-1.0, 1.0], [1.0, -1.0], [1.0, 1.0]], dtype=np.float32)


def _quad_uvs() -> np.ndarray:
    return np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]], dtype=np.float32)


def _quad_indices() -> np.ndarray:
    return np.array([0, 1, 2, 2, 1, 3], dtype=np.uint16)


@dataclass(eq=False)
class VertexBuffers:
    """Vertex, UV, index and deform buffers; starts with a full-viewport quad."""

    verts: np.ndarray = field(default_factory=_quad_verts)
    uvs: np.ndarray = field(default_factory=_quad_uvs)
    indices: np.ndarray = field(default_factory=_quad_indices)
    deforms: np.ndarray = field(default_factory=lambda: np.zeros((4, 2), dtype=np.float32))

    def push(self, mesh: Mesh) -> tuple[int, int]:
        """Append a mesh and return its ``(index_offset, vert_offset)``."""
        index_offset = len(self.indices)
        vert_offset = len(self.verts)
        if index_offset > _U16_MAX or vert_offset > _U16_MAX:
            raise OverflowError("vertex buffers exceed 16-bit offsets")
        new_indices = np.asarray(mesh.indices, dtype=np.int64) + vert_offset
        if new_indices.size and new_indices.max() > _U16_MAX:
            raise OverflowError("mesh index exceeds 16-bit range")

        vertices = np.asarray(mesh.vertices, dtype=np.float32).reshape(-1, 2)
        self.verts = np.concatenate([self.verts, vertices])
        self.uvs = np.concatenate(
            [self.uvs, np.asarray(mesh.uvs, dtype=np.float32).reshape(-1, 2)]
        )
        self.indices = np.concatenate([self.indices, new_indices.astype(np.uint16)])
        self.deforms = np.concatenate(
            [self.deforms, np.zeros((len(vertices), 2), dtype=np.float32)]
        )
        return index_offset, vert_offset