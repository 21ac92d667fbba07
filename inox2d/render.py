"""Rendering bookkeeping and the draw-call dispatch for renderer backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from itertools import islice
from typing import TYPE_CHECKING

from .components import DeformStack, Mask, Masks, ZSort
from .drawables import CompositeComponents, TexturedMeshComponents, drawable_kind
from .params import BindingKind
from .tree import InoxNodeTree
from .vertex_buffers import VertexBuffers
from .world import World

if TYPE_CHECKING:
    from .puppet import Puppet


@dataclass
class TexturedMeshRenderCtx:
    """Where a textured mesh's data lives inside the shared vertex buffers."""

    index_offset: int
    vert_offset: int
    index_len: int
    vert_len: int


@dataclass
class CompositeRenderCtx:
    """Drawable children of a composite, ordered by z-sort before drawing."""

    zsorted_children_list: list[int] = field(default_factory=list)


def _zsort(world: World, uuid: int) -> float:
    zsort = world.get(ZSort, uuid)
    if zsort is None:
        raise LookupError(f"node {uuid} has no ZSort component")
    return zsort.value


class RenderCtx:
    """Vertex buffers and draw order of a puppet."""

    def __init__(self, puppet: "Puppet") -> None:
        """Fill the vertex buffers and install render contexts on drawable nodes."""
        nodes = puppet.nodes
        world = puppet.node_comps

        nodes_to_deform = {
            binding.node
            for param in puppet.params.values()
            for binding in param.bindings
            if binding.kind is BindingKind.DEFORM
        }

        self.vertex_buffers = VertexBuffers()
        count = 0
        for node in nodes:
            kind = drawable_kind(node.uuid, world, True)
            if kind is None:
                continue
            count += 1
            if isinstance(kind, TexturedMeshComponents):
                index_offset, vert_offset = self.vertex_buffers.push(kind.mesh)
                vert_len = len(kind.mesh.vertices)
                world.add(
                    node.uuid,
                    TexturedMeshRenderCtx(index_offset, vert_offset, len(kind.mesh.indices), vert_len),
                )
                if node.uuid in nodes_to_deform:
                    world.add(node.uuid, DeformStack(vert_len))
            else:
                children = [
                    child.uuid
                    for child in nodes.get_children(node.uuid)
                    if drawable_kind(child.uuid, world, False) is not None
                ]
                count -= len(children)
                world.add(node.uuid, CompositeRenderCtx(children))

        self.root_drawables_zsorted: list[int] = [0] * count

    def reset(self, nodes: InoxNodeTree, world: World) -> None:
        """Reset every ``DeformStack`` for a new frame."""
        for node in nodes:
            stack = world.get(DeformStack, node.uuid)
            if stack is not None:
                stack.reset()

    def update(self, nodes: InoxNodeTree, world: World) -> None:
        """Refresh draw order and write combined deforms into the deform buffer."""
        roots: list[tuple[int, float]] = []

        for node in islice(iter(nodes), 1, None):
            kind = drawable_kind(node.uuid, world, False)
            if kind is None:
                continue
            parent = nodes.get_parent(node.uuid)
            if not isinstance(drawable_kind(parent.uuid, world, False), CompositeComponents):
                roots.append((node.uuid, _zsort(world, node.uuid)))

            if isinstance(kind, CompositeComponents):
                ctx = world.get(CompositeRenderCtx, node.uuid)
                ctx.zsorted_children_list.sort(key=lambda uuid: _zsort(world, uuid), reverse=True)
            else:
                stack = world.get(DeformStack, node.uuid)
                if stack is None:
                    continue
                ctx = world.get(TexturedMeshRenderCtx, node.uuid)
                if ctx.vert_len != stack.deform_len:
                    raise ValueError(
                        "Required output deform dimensions different from what DeformStack is initialized with."
                    )
                start = ctx.vert_offset
                self.vertex_buffers.deforms[start:start + ctx.vert_len] = stack.combine()

        roots.sort(key=lambda pair: pair[1], reverse=True)
        n = min(len(roots), len(self.root_drawables_zsorted))
        self.root_drawables_zsorted[:n] = [uuid for uuid, _ in roots[:n]]


class InoxRenderer(ABC):
    """A rendering backend; ``draw`` dispatches calls in the standard order."""

    @abstractmethod
    def on_begin_masks(self, masks: Masks) -> None:
        """Begin masking."""

    @abstractmethod
    def on_begin_mask(self, mask: Mask) -> None:
        """Prepare for rendering a single mask."""

    @abstractmethod
    def on_begin_masked_content(self) -> None:
        """Prepare for rendering masked content."""

    @abstractmethod
    def on_end_mask(self) -> None:
        """End masking."""

    @abstractmethod
    def draw_textured_mesh_content(
        self, as_mask: bool, components: TexturedMeshComponents, render_ctx: TexturedMeshRenderCtx, uuid: int
    ) -> None:
        """Draw the content of a textured mesh."""

    @abstractmethod
    def begin_composite_content(
        self, as_mask: bool, components: CompositeComponents, render_ctx: CompositeRenderCtx, uuid: int
    ) -> None:
        """Prepare for rendering the children of a composite."""

    @abstractmethod
    def finish_composite_content(
        self, as_mask: bool, components: CompositeComponents, render_ctx: CompositeRenderCtx, uuid: int
    ) -> None:
        """Finish compositing."""

    def draw_drawable(self, as_mask: bool, world: World, uuid: int) -> None:
        """Draw one drawable node together with its masks."""
        kind = drawable_kind(uuid, world, False)
        if kind is None:
            raise LookupError("Node must be a Drawable.")
        masks = kind.drawable.masks

        if masks is not None:
            self.on_begin_masks(masks)
            for mask in masks.masks:
                self.on_begin_mask(mask)
                self.draw_drawable(True, world, mask.source)
            self.on_begin_masked_content()

        if isinstance(kind, TexturedMeshComponents):
            self.draw_textured_mesh_content(as_mask, kind, world.get(TexturedMeshRenderCtx, uuid), uuid)
        else:
            self.draw_composite(as_mask, world, kind, uuid)

        if masks is not None:
            self.on_end_mask()

    def draw_composite(self, as_mask: bool, world: World, components: CompositeComponents, uuid: int) -> None:
        """Draw a composite and its children; nothing happens if it has none."""
        render_ctx = world.get(CompositeRenderCtx, uuid)
        if render_ctx is None:
            raise LookupError(f"node {uuid} has no CompositeRenderCtx")
        if not render_ctx.zsorted_children_list:
            return

        self.begin_composite_content(as_mask, components, render_ctx, uuid)
        for child in render_ctx.zsorted_children_list:
            kind = drawable_kind(child, world, False)
            if kind is None:
                raise LookupError("All children in zsorted_children_list should be a Drawable.")
            if isinstance(kind, CompositeComponents):
                raise ValueError("Composite inside Composite not allowed.")
            self.draw_textured_mesh_content(as_mask, kind, world.get(TexturedMeshRenderCtx, child), child)
        self.finish_composite_content(as_mask, components, render_ctx, uuid)

    def draw(self, puppet: "Puppet") -> None:
        """Draw every top-level drawable of ``puppet`` in z-sort order."""
        if puppet.render_ctx is None:
            raise RuntimeError("RenderCtx of puppet must be initialized before calling draw().")
        for uuid in list(puppet.render_ctx.root_drawables_zsorted):
            self.draw_drawable(False, puppet.node_comps, uuid)