"""Puppet nodes and the tree that holds them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from .transform import TransformOffset


@dataclass(eq=False)
class InoxNode:
    """A node of a puppet."""

    uuid: int
    name: str
    enabled: bool = True
    zsort: float = 0.0
    trans_offset: TransformOffset = field(default_factory=TransformOffset)
    lock_to_root: bool = False


class InoxNodeTree:
    """Nodes indexed by uuid and arranged under a single root."""

    def __init__(self, root: InoxNode) -> None:
        self.root_node_id = root.uuid
        self._nodes: dict[int, InoxNode] = {root.uuid: root}
        self._parents: dict[int, int] = {}
        self._children: dict[int, list[int]] = {root.uuid: []}

    def add(self, parent: int, uuid: int, node: InoxNode) -> None:
        """Append ``node`` under ``parent`` as its last child."""
        if parent not in self._nodes:
            raise KeyError(f"parent {parent} should be added earlier")
        if uuid in self._nodes:
            raise ValueError(f"duplicate inox node uuid {uuid}")
        self._nodes[uuid] = node
        self._parents[uuid] = parent
        self._children[uuid] = []
        self._children[parent].append(uuid)

    def get_node(self, uuid: int) -> Optional[InoxNode]:
        """The node with ``uuid``, or ``None``."""
        return self._nodes.get(uuid)

    def __iter__(self) -> Iterator[InoxNode]:
        """All nodes in insertion order (not a tree traversal)."""
        return iter(list(self._nodes.values()))

    def __len__(self) -> int:
        return len(self._nodes)

    def pre_order_iter(self) -> Iterator[InoxNode]:
        """Nodes in pre-order, parents before their children."""
        stack = [self.root_node_id]
        while stack:
            uuid = stack.pop()
            yield self._nodes[uuid]
            stack.extend(reversed(self._children[uuid]))

    def get_parent(self, uuid: int) -> InoxNode:
        """The parent of ``uuid``; the root has none."""
        if uuid not in self._nodes:
            raise KeyError(f"no node with uuid {uuid}")
        if uuid not in self._parents:
            raise ValueError("the root node has no parent")
        return self._nodes[self._parents[uuid]]

    def get_children(self, uuid: int) -> Iterator[InoxNode]:
        """The direct children of ``uuid`` in order."""
        if uuid not in self._children:
            raise KeyError(f"no node with uuid {uuid}")
        return (self._nodes[child] for child in list(self._children[uuid]))