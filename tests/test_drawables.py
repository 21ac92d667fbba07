import logging

import pytest

from inox2d.components import Composite, Drawable, Mesh, TexturedMesh, TransformStore
from inox2d.drawables import CompositeComponents, TexturedMeshComponents, drawable_kind
from inox2d.world import World


def _world(*components, node=7):
    world = World()
    for comp in components:
        world.add(node, comp)
    return world


def test_not_drawable():
    assert drawable_kind(7, _world(TransformStore())) is None


def test_textured_mesh():
    texture = TexturedMesh(3)
    mesh = Mesh(vertices=[[0, 0]])
    kind = drawable_kind(7, _world(Drawable(), TransformStore(), texture, mesh))
    assert isinstance(kind, TexturedMeshComponents)
    assert kind.texture is texture
    assert kind.mesh is mesh


def test_composite():
    data = Composite()
    kind = drawable_kind(7, _world(Drawable(), TransformStore(), data))
    assert isinstance(kind, CompositeComponents)
    assert kind.data is data


def test_both_treated_as_textured_mesh(caplog):
    world = _world(Drawable(), TransformStore(), TexturedMesh(0), Mesh(), Composite())
    with caplog.at_level(logging.WARNING):
        kind = drawable_kind(7, world, True)
    assert isinstance(kind, TexturedMeshComponents)
    assert "both TexturedMesh and Composite" in caplog.text


def test_neither_logged_when_checked(caplog):
    with caplog.at_level(logging.WARNING):
        kind = drawable_kind(7, _world(Drawable(), TransformStore()), True)
    assert kind is None
    assert "neither TexturedMesh nor Composite" in caplog.text


def test_missing_transform_raises():
    with pytest.raises(LookupError):
        drawable_kind(7, _world(Drawable(), Composite()))


def test_missing_mesh_raises():
    with pytest.raises(LookupError):
        drawable_kind(7, _world(Drawable(), TransformStore(), TexturedMesh(0)))