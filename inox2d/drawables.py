"""Recognising drawable nodes from their components."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from .components import Composite, Drawable, Mesh, TexturedMesh, TransformStore
from .world import World

_log = logging.getLogger(__name__)


@dataclass(eq=False)
class TexturedMeshComponents:
    """Components of a textured mesh ("Part")."""

    transform: np.ndarray
    drawable: Drawable
    texture: TexturedMesh
    mesh: Mesh


@dataclass(eq=False)
class CompositeComponents:
    """Components of a Composite node."""

    transform: np.ndarray
    drawable: Drawable
    data: Composite


def drawable_kind(
    uuid: int, world: World, check: bool = False
) -> Optional[Union[TexturedMeshComponents, CompositeComponents]]:
    """The drawable components of a node, or ``None`` if it is not drawable.

    With ``check``, non-standard component combinations are logged as warnings.
    """
    drawable = world.get(Drawable, uuid)
    if drawable is None:
        return None
    store = world.get(TransformStore, uuid)
    if store is None:
        raise LookupError("A drawable must have an associated transform.")
    textured_mesh = world.get(TexturedMesh, uuid)
    composite = world.get(Composite, uuid)

    if textured_mesh is not None:
        if composite is not None and check:
            _log.warning(
                "Node %s as a Drawable has both TexturedMesh and Composite, treat as TexturedMesh.",
                uuid,
            )
        mesh = world.get(Mesh, uuid)
        if mesh is None:
            raise LookupError("A TexturedMesh must have an associated Mesh.")
        return TexturedMeshComponents(store.absolute, drawable, textured_mesh, mesh)
    if composite is not None:
        return CompositeComponents(store.absolute, drawable, composite)
    if check:
        _log.warning(
            "Node %s as a Drawable has neither TexturedMesh nor Composite, skipping.", uuid
        )
    return None