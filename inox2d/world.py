"""Storage of components attached to nodes, keyed by component type."""

from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

C = TypeVar("C")


class World:
    """Holds at most one component of each type per node."""

    def __init__(self) -> None:
        self._columns: dict[type, dict[int, Any]] = {}

    def add(self, node: int, component: Any) -> None:
        """Attach ``component`` to ``node``; a second one of the same type is an error."""
        column = self._columns.setdefault(type(component), {})
        if node in column:
            raise ValueError(
                f"node {node} already has a {type(component).__name__} component"
            )
        column[node] = component

    def get(self, kind: Type[C], node: int) -> Optional[C]:
        """The component of type ``kind`` attached to ``node``, or ``None``."""
        column = self._columns.get(kind)
        if column is None:
            return None
        return column.get(node)