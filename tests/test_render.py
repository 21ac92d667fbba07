import numpy as np
import pytest

from inox2d.components import (
    Composite,
    DeformSource,
    DeformSourceKind,
    DeformStack,
    Drawable,
    Mask,
    MaskMode,
    Masks,
    Mesh,
    TexturedMesh,
)
from inox2d.interp import InterpolateMode
from inox2d.matrix import Matrix2d
from inox2d.meta import PuppetMeta
from inox2d.params import AxisPoints, Binding, BindingKind, Param
from inox2d.pendulum import PuppetPhysics
from inox2d.puppet import Puppet
from inox2d.render import (
    CompositeRenderCtx,
    InoxRenderer,
    TexturedMeshRenderCtx,
)
from inox2d.tree import InoxNode


class Recorder(InoxRenderer):
    def __init__(self):
        self.calls = []

    def on_begin_masks(self, masks):
        self.calls.append(("begin_masks",))

    def on_begin_mask(self, mask):
        self.calls.append(("begin_mask", mask.source))

    def on_begin_masked_content(self):
        self.calls.append(("masked_content",))

    def on_end_mask(self):
        self.calls.append(("end_mask",))

    def draw_textured_mesh_content(self, as_mask, components, render_ctx, uuid):
        self.calls.append(("mesh", as_mask, uuid))

    def begin_composite_content(self, as_mask, components, render_ctx, uuid):
        self.calls.append(("begin_composite", as_mask, uuid))

    def finish_composite_content(self, as_mask, components, render_ctx, uuid):
        self.calls.append(("finish_composite", as_mask, uuid))


def _puppet(params=None):
    return Puppet(PuppetMeta(), PuppetPhysics(1.0, 1.0), InoxNode(0, "root"), params or {})


def _part(puppet, parent, uuid, zsort=0.0, masks=None):
    puppet.nodes.add(parent, uuid, InoxNode(uuid, f"part{uuid}", zsort=zsort))
    puppet.node_comps.add(uuid, Drawable(masks=masks))
    puppet.node_comps.add(uuid, TexturedMesh(0))
    puppet.node_comps.add(
        uuid,
        Mesh(vertices=[[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]], uvs=[[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]], indices=[0, 1, 2]),
    )


def _composite(puppet, parent, uuid, zsort=0.0):
    puppet.nodes.add(parent, uuid, InoxNode(uuid, f"comp{uuid}", zsort=zsort))
    puppet.node_comps.add(uuid, Drawable())
    puppet.node_comps.add(uuid, Composite())


def _ready(puppet):
    puppet.init_transforms()
    puppet.init_rendering()
    puppet.begin_frame()
    puppet.end_frame(0.0)
    return puppet


def test_render_ctx_places_mesh_after_quad():
    puppet = _puppet()
    _part(puppet, 0, 1)
    _ready(puppet)
    ctx = puppet.node_comps.get(TexturedMeshRenderCtx, 1)
    assert ctx == TexturedMeshRenderCtx(index_offset=6, vert_offset=4, index_len=3, vert_len=3)
    assert puppet.render_ctx.root_drawables_zsorted == [1]
    assert len(puppet.render_ctx.vertex_buffers.deforms) == 7


def test_deform_stack_only_for_deformed_nodes():
    binding = Binding(1, Matrix2d(), InterpolateMode.LINEAR, BindingKind.DEFORM, Matrix2d())
    param = Param(1, "p", True, [0.0, 0.0], [1.0, 1.0], [0.0, 0.0], AxisPoints([0.0, 1.0], [0.0, 1.0]), [binding])
    puppet = _puppet({"p": param})
    _part(puppet, 0, 1)
    _part(puppet, 0, 2)
    _ready(puppet)
    assert puppet.node_comps.get(DeformStack, 1).deform_len == 3
    assert puppet.node_comps.get(DeformStack, 2) is None


def test_update_writes_deforms():
    binding = Binding(1, Matrix2d(), InterpolateMode.LINEAR, BindingKind.DEFORM, Matrix2d())
    param = Param(1, "p", True, [0.0, 0.0], [1.0, 1.0], [0.0, 0.0], AxisPoints([0.0, 1.0], [0.0, 1.0]), [binding])
    puppet = _puppet({"p": param})
    _part(puppet, 0, 1)
    _ready(puppet)
    deform = [[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]]
    puppet.node_comps.get(DeformStack, 1).push(DeformSource(DeformSourceKind.PARAM, 1), deform)
    puppet.render_ctx.update(puppet.nodes, puppet.node_comps)
    deforms = puppet.render_ctx.vertex_buffers.deforms
    assert np.allclose(deforms[4:7], deform)
    assert np.allclose(deforms[:4], 0.0)


def test_root_drawables_sorted_by_descending_zsort():
    puppet = _puppet()
    _part(puppet, 0, 1, zsort=1.0)
    _part(puppet, 0, 2, zsort=2.0)
    _ready(puppet)
    assert puppet.render_ctx.root_drawables_zsorted == [2, 1]
    recorder = Recorder()
    recorder.draw(puppet)
    assert recorder.calls == [("mesh", False, 2), ("mesh", False, 1)]


def test_masked_drawing_order():
    puppet = _puppet()
    _part(puppet, 0, 1, zsort=2.0, masks=Masks(masks=[Mask(2, MaskMode.MASK)]))
    _part(puppet, 0, 2, zsort=1.0)
    _ready(puppet)
    recorder = Recorder()
    recorder.draw(puppet)
    assert recorder.calls == [
        ("begin_masks",),
        ("begin_mask", 2),
        ("mesh", True, 2),
        ("masked_content",),
        ("mesh", False, 1),
        ("end_mask",),
        ("mesh", False, 2),
    ]


def test_composite_children_sorted_and_drawn():
    puppet = _puppet()
    _composite(puppet, 0, 1)
    _part(puppet, 1, 2, zsort=1.0)
    _part(puppet, 1, 3, zsort=2.0)
    _ready(puppet)
    assert puppet.render_ctx.root_drawables_zsorted == [1]
    assert puppet.node_comps.get(CompositeRenderCtx, 1).zsorted_children_list == [3, 2]
    recorder = Recorder()
    recorder.draw(puppet)
    assert recorder.calls == [
        ("begin_composite", False, 1),
        ("mesh", False, 3),
        ("mesh", False, 2),
        ("finish_composite", False, 1),
    ]


def test_empty_composite_draws_nothing():
    puppet = _puppet()
    _composite(puppet, 0, 1)
    _ready(puppet)
    recorder = Recorder()
    recorder.draw(puppet)
    assert recorder.calls == []


def test_composite_inside_composite_rejected():
    puppet = _puppet()
    _composite(puppet, 0, 1)
    _composite(puppet, 1, 2)
    _part(puppet, 2, 3)
    _ready(puppet)
    assert puppet.render_ctx.root_drawables_zsorted == [1]
    with pytest.raises(ValueError):
        Recorder().draw(puppet)


def test_draw_requires_render_ctx():
    puppet = _puppet()
    with pytest.raises(RuntimeError):
        Recorder().draw(puppet)


def test_draw_drawable_on_plain_node_raises():
    puppet = _puppet()
    puppet.nodes.add(0, 1, InoxNode(1, "plain"))
    _ready(puppet)
    with pytest.raises(LookupError):
        Recorder().draw_drawable(False, puppet.node_comps, 1)


def test_reset_disables_deforms():
    binding = Binding(1, Matrix2d(), InterpolateMode.LINEAR, BindingKind.DEFORM, Matrix2d())
    param = Param(1, "p", True, [0.0, 0.0], [1.0, 1.0], [0.0, 0.0], AxisPoints([0.0, 1.0], [0.0, 1.0]), [binding])
    puppet = _puppet({"p": param})
    _part(puppet, 0, 1)
    _ready(puppet)
    stack = puppet.node_comps.get(DeformStack, 1)
    stack.push(DeformSource(DeformSourceKind.PARAM, 1), [[1.0, 1.0]] * 3)
    puppet.render_ctx.reset(puppet.nodes, puppet.node_comps)
    puppet.render_ctx.update(puppet.nodes, puppet.node_comps)
    assert np.allclose(puppet.render_ctx.vertex_buffers.deforms, 0.0)