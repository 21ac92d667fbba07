"""Parameters and the bindings through which they animate nodes."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Sequence

import numpy as np

from .components import DeformSource, DeformSourceKind, DeformStack, Mesh, TransformStore, ZSort
from .interp import InterpolateMode, InterpRange, bi_interpolate_f32, bi_interpolate_vec2s_additive
from .matrix import Matrix2d
from .world import World


class BindingKind(Enum):
    """Which property of a node a binding drives; values are the file's names."""

    ZSORT = "zSort"
    TRANSFORM_TX = "transform.t.x"
    TRANSFORM_TY = "transform.t.y"
    TRANSFORM_SX = "transform.s.x"
    TRANSFORM_SY = "transform.s.y"
    TRANSFORM_RX = "transform.r.x"
    TRANSFORM_RY = "transform.r.y"
    TRANSFORM_RZ = "transform.r.z"
    DEFORM = "deform"
    OPACITY = "opacity"


# kind -> (attribute of TransformOffset, component index, multiplicative)
_TRANSFORM_TARGETS = {
    BindingKind.TRANSFORM_TX: ("translation", 0, False),
    BindingKind.TRANSFORM_TY: ("translation", 1, False),
    BindingKind.TRANSFORM_SX: ("scale", 0, True),
    BindingKind.TRANSFORM_SY: ("scale", 1, True),
    BindingKind.TRANSFORM_RX: ("rotation", 0, False),
    BindingKind.TRANSFORM_RY: ("rotation", 1, False),
    BindingKind.TRANSFORM_RZ: ("rotation", 2, False),
}


@dataclass(eq=False)
class Binding:
    """Ties a node property to the values of a parameter at its axis points."""

    node: int
    is_set: Matrix2d
    interpolate_mode: InterpolateMode
    kind: BindingKind
    values: Optional[Matrix2d] = None


@dataclass
class AxisPoints:
    """Sorted, normalised key positions along each parameter axis."""

    x: list = field(default_factory=list)
    y: list = field(default_factory=list)


def _axis_indices(points: Sequence[float], value: float) -> tuple[int, int]:
    last = len(points) - 1
    if last < 0:
        raise ValueError("parameter has no axis points")
    index = bisect_left(points, value)
    found = index <= last and points[index] == value
    if last == 0:
        return 0, 0
    if found:
        return (last - 1, last) if index >= last else (index, index + 1)
    if index == 0 or index > last:
        raise IndexError(f"parameter value {value} lies outside its axis points")
    return index - 1, index


def _component(world: World, kind: type, node: int) -> Any:
    component = world.get(kind, node)
    if component is None:
        raise LookupError(f"node {node} has no {kind.__name__} component")
    return component


def _vec2s(value: Any) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(-1, 2)


@dataclass(eq=False)
class Param:
    """A bounded one- or two-dimensional value that animates nodes through bindings."""

    uuid: int
    name: str
    is_vec2: bool
    min: np.ndarray
    max: np.ndarray
    defaults: np.ndarray
    axis_points: AxisPoints
    bindings: list[Binding] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.min = np.array(self.min, dtype=float)
        self.max = np.array(self.max, dtype=float)
        self.defaults = np.array(self.defaults, dtype=float)

    def apply(self, value, world: World) -> None:
        """Modify the bound components of ``world`` for this parameter value.

        Must run at most once per frame.
        """
        val = np.clip(np.asarray(value, dtype=float), self.min, self.max)
        with np.errstate(all="ignore"):
            normed = (val - self.min) / (self.max - self.min)

        ax, ay = self.axis_points.x, self.axis_points.y
        x0, x1 = _axis_indices(ax, float(normed[0]))
        y0, y1 = _axis_indices(ay, float(normed[1]))

        range_in = InterpRange(np.array([ax[x0], ay[y0]], dtype=float), np.array([ax[x1], ay[y1]], dtype=float))
        t = np.clip(normed, range_in.beg, range_in.end)

        for binding in self.bindings:
            self._apply_binding(binding, t, range_in, (x0, x1, y0, y1), world)

    def _apply_binding(self, binding: Binding, t, range_in, indices, world: World) -> None:
        kind = binding.kind
        if kind is BindingKind.OPACITY:
            return
        x0, x1, y0, y1 = indices
        matrix = binding.values
        mode = binding.interpolate_mode

        if kind is BindingKind.DEFORM:
            out_top = InterpRange(_vec2s(matrix[x0, y0]), _vec2s(matrix[x1, y0]))
            out_bottom = InterpRange(_vec2s(matrix[x0, y1]), _vec2s(matrix[x1, y1]))
            mesh = world.get(Mesh, binding.node)
            if mesh is None:
                raise LookupError("Deform param target must have an associated Mesh.")
            direct = bi_interpolate_vec2s_additive(
                t, range_in, out_top, out_bottom, mode, np.zeros((len(mesh.vertices), 2))
            )
            stack = world.get(DeformStack, binding.node)
            if stack is None:
                raise LookupError("Nodes being deformed must have a DeformStack component.")
            stack.push(DeformSource(DeformSourceKind.PARAM, self.uuid), direct)
            return

        out_top = InterpRange(float(matrix[x0, y0]), float(matrix[x1, y0]))
        out_bottom = InterpRange(float(matrix[x0, y1]), float(matrix[x1, y1]))
        delta = bi_interpolate_f32(t, range_in, out_top, out_bottom, mode)

        if kind is BindingKind.ZSORT:
            _component(world, ZSort, binding.node).value += delta
            return

        attr, axis, multiply = _TRANSFORM_TARGETS[kind]
        vector = getattr(_component(world, TransformStore, binding.node).relative, attr)
        if multiply:
            vector[axis] *= delta
        else:
            vector[axis] += delta


class SetParamError(LookupError):
    """Raised when setting a parameter that does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No parameter named {name}")


class ParamCtx:
    """Current values of all parameters of a puppet."""

    def __init__(self, params: dict[str, Param]) -> None:
        self.values: dict[str, np.ndarray] = {
            name: np.array(param.defaults, dtype=float) for name, param in params.items()
        }

    def reset(self, params: dict[str, Param]) -> None:
        """Reset every parameter to its default value."""
        for name in self.values:
            self.values[name] = np.array(params[name].defaults, dtype=float)

    def set(self, name: str, value) -> None:
        """Set the parameter ``name`` to ``value``."""
        if name not in self.values:
            raise SetParamError(name)
        self.values[name] = np.array(value, dtype=float)

    def apply(self, params: dict[str, Param], world: World) -> None:
        """Apply every non-zero parameter value to ``world``; once per frame."""
        for name, value in self.values.items():
            if np.any(value != 0.0):
                params[name].apply(value, world)