"""Combining per-vertex displacement lists."""

from __future__ import annotations

from typing import Iterable

import numpy as np


def linear_combine(direct_deforms: Iterable, length: int) -> np.ndarray:
    """Sum direct deforms element-wise into a new ``(length, 2)`` array."""
    result = np.zeros((length, 2), dtype=float)
    for deform in direct_deforms:
        arr = np.asarray(deform, dtype=float).reshape(-1, 2)
        if arr.shape[0] != length:
            raise ValueError("Trying to combine direct deformations with wrong dimensions.")
        result += arr
    return result