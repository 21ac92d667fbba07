"""Per-frame relative and absolute transforms of puppet nodes."""

from __future__ import annotations

from itertools import islice
from typing import TYPE_CHECKING, Any

from .components import TransformStore, ZSort
from .transform import TransformOffset
from .tree import InoxNodeTree
from .world import World

if TYPE_CHECKING:
    from .puppet import Puppet


def _require(world: World, kind: type, uuid: int) -> Any:
    component = world.get(kind, uuid)
    if component is None:
        raise LookupError(f"node {uuid} has no {kind.__name__} component")
    return component


class TransformCtx:
    """Keeps a modifiable transform and z-sort value for every node."""

    def __init__(self, puppet: "Puppet") -> None:
        """Give every node of ``puppet`` a ``TransformStore`` and a ``ZSort``."""
        for node in puppet.nodes:
            puppet.node_comps.add(node.uuid, TransformStore())
            puppet.node_comps.add(node.uuid, ZSort())

    def reset(self, nodes: InoxNodeTree, world: World) -> None:
        """Restore every node's relative transform and z-sort to its stored value."""
        for node in nodes:
            offset = node.trans_offset
            _require(world, TransformStore, node.uuid).relative = TransformOffset(
                offset.translation, offset.rotation, offset.scale, offset.pixel_snap
            )
            _require(world, ZSort, node.uuid).value = node.zsort

    def update(self, nodes: InoxNodeTree, world: World) -> None:
        """Combine relative transforms from the root down into absolute ones."""
        root_id = nodes.root_node_id
        root_store = _require(world, TransformStore, root_id)
        root_trans = root_store.relative.to_matrix()
        root_store.absolute = root_trans
        root_zsort = _require(world, ZSort, root_id).value

        for node in islice(nodes.pre_order_iter(), 1, None):
            if node.lock_to_root:
                base_trans, base_zsort = root_trans, root_zsort
            else:
                parent = nodes.get_parent(node.uuid)
                base_trans = _require(world, TransformStore, parent.uuid).absolute
                base_zsort = _require(world, ZSort, parent.uuid).value

            store = _require(world, TransformStore, node.uuid)
            store.absolute = base_trans @ store.relative.to_matrix()
            _require(world, ZSort, node.uuid).value += base_zsort