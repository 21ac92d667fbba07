"""Scalar, vector and bilinear interpolation helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

import numpy as np

T = TypeVar("T")


class InterpolateMode(Enum):
    """How values between two keys are computed."""

    NEAREST = "Nearest"
    LINEAR = "Linear"


@dataclass(frozen=True)
class InterpRange(Generic[T]):
    """A pair of values marking the start and end of a range."""

    beg: T
    end: T

    def to_x(self) -> "InterpRange[float]":
        """The x components of a range of 2D vectors."""
        return InterpRange(float(self.beg[0]), float(self.end[0]))

    def to_y(self) -> "InterpRange[float]":
        """The y components of a range of 2D vectors."""
        return InterpRange(float(self.beg[1]), float(self.end[1]))


def _unwrap(value: Any) -> Any:
    arr = np.asarray(value, dtype=float)
    if arr.ndim == 0:
        return float(arr)
    return arr


def interpolate_nearest(t, range_in, range_out):
    """Pick the output end whose input end is closest to ``t``."""
    if (range_in.end - t) < (t - range_in.beg):
        return _unwrap(range_out.end)
    return _unwrap(range_out.beg)


def interpolate_linear(t, range_in, range_out):
    """Map ``t`` linearly from ``range_in`` onto ``range_out``."""
    beg = np.asarray(range_out.beg, dtype=float)
    end = np.asarray(range_out.end, dtype=float)
    in_beg = np.float64(range_in.beg)
    in_end = np.float64(range_in.end)
    with np.errstate(divide="ignore", invalid="ignore"):
        result = (np.float64(t) - in_beg) * (end - beg) / (in_end - in_beg) + beg
    return _unwrap(result)


def interpolate_f32(t, range_in, range_out, mode):
    """Interpolate a scalar (or, element-wise, an array) with ``mode``."""
    if mode is InterpolateMode.NEAREST:
        return interpolate_nearest(t, range_in, range_out)
    if mode is InterpolateMode.LINEAR:
        return interpolate_linear(t, range_in, range_out)
    raise ValueError(f"unknown interpolation mode {mode!r}")


def interpolate_vec2(t, range_in, range_out, mode):
    """Interpolate a 2D vector component by component."""
    x = interpolate_f32(t, range_in, range_out.to_x(), mode)
    y = interpolate_f32(t, range_in, range_out.to_y(), mode)
    return np.array([x, y], dtype=float)


def _additive(base, *arrays):
    out = np.array(base, dtype=float, copy=True)
    sources = [np.asarray(a, dtype=float) for a in arrays]
    n = min([len(out)] + [len(a) for a in sources])
    return out, [a[:n] for a in sources], n


def interpolate_f32s_additive(t, range_in, range_out, mode, base):
    """Return ``base`` plus the element-wise interpolation of two float lists."""
    out, (beg, end), n = _additive(base, range_out.beg, range_out.end)
    out[:n] += interpolate_f32(t, range_in, InterpRange(beg, end), mode)
    return out


def interpolate_vec2s_additive(t, range_in, range_out, mode, base):
    """Return ``base`` plus the element-wise interpolation of two vector lists."""
    out, (beg, end), n = _additive(base, range_out.beg, range_out.end)
    out[:n] += interpolate_f32(t, range_in, InterpRange(beg, end), mode)
    return out


def bi_interpolate_f32(t, range_in, out_top, out_bottom, mode):
    """Bilinearly interpolate a scalar over a rectangle of inputs."""
    beg = interpolate_f32(t[0], range_in.to_x(), out_top, mode)
    end = interpolate_f32(t[0], range_in.to_x(), out_bottom, mode)
    return interpolate_f32(t[1], range_in.to_y(), InterpRange(beg, end), mode)


def bi_interpolate_vec2(t, range_in, out_top, out_bottom, mode):
    """Bilinearly interpolate a 2D vector over a rectangle of inputs."""
    beg = interpolate_vec2(t[0], range_in.to_x(), out_top, mode)
    end = interpolate_vec2(t[0], range_in.to_x(), out_bottom, mode)
    return interpolate_vec2(t[1], range_in.to_y(), InterpRange(beg, end), mode)


def bi_interpolate_f32s_additive(t, range_in, out_top, out_bottom, mode, base):
    """Return ``base`` plus element-wise bilinear interpolation of float lists."""
    out, (tb, te, bb, be), n = _additive(
        base, out_top.beg, out_top.end, out_bottom.beg, out_bottom.end
    )
    out[:n] += bi_interpolate_f32(
        t, range_in, InterpRange(tb, te), InterpRange(bb, be), mode
    )
    return out


def bi_interpolate_vec2s_additive(t, range_in, out_top, out_bottom, mode, base):
    """Return ``base`` plus element-wise bilinear interpolation of vector lists."""
    out, (tb, te, bb, be), n = _additive(
        base, out_top.beg, out_top.end, out_bottom.beg, out_bottom.end
    )
    out[:n] += bi_interpolate_f32(
        t, range_in, InterpRange(tb, te), InterpRange(bb, be), mode
    )
    return out