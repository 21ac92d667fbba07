"""A small dense two-dimensional matrix of arbitrary values."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Generic, Sequence, TypeVar

T = TypeVar("T")


class Matrix2dFromSliceVecsError(ValueError):
    """Raised when rows of different lengths are turned into a matrix."""

    def __init__(self, lengths: list[int]):
        self.lengths = lengths
        super().__init__(
            f"Couldn't construct matrix: not all lines have the same length ({lengths!r})"
        )


@dataclass
class Matrix2d(Generic[T]):
    """Row-major matrix; when ``transposed`` the two indices are swapped on access."""

    width: int = 0
    height: int = 0
    transposed: bool = False
    data: list = field(default_factory=list)

    def get(self, ix: int, iy: int) -> Any:
        """Return the element at ``(ix, iy)`` or ``None`` if it is outside the data."""
        if self.transposed:
            ix, iy = iy, ix
        if ix < 0 or iy < 0:
            return None
        index = iy * self.width + ix
        if index < len(self.data):
            return self.data[index]
        return None

    def __getitem__(self, index: tuple[int, int]) -> Any:
        ix, iy = index
        if self.transposed:
            ix, iy = iy, ix
        if not (0 <= ix < self.width and 0 <= iy < self.height):
            raise IndexError(
                f"Point index out of bounds: ({ix}, {iy}) > ({self.width}, {self.height})"
            )
        return self.data[iy * self.width + ix]

    @classmethod
    def default_filled(cls, width: int, height: int, transposed: bool, fill: Any = 0.0) -> "Matrix2d":
        """A matrix of the given size with every element a copy of ``fill``."""
        return cls(width, height, transposed, [copy.copy(fill) for _ in range(width * height)])

    @classmethod
    def from_slice_vecs(cls, rows: Sequence[Sequence[Any]], transposed: bool) -> "Matrix2d":
        """Build a matrix from equally long rows."""
        rows = [list(row) for row in rows]
        if not rows:
            return cls(0, 0, transposed, [])
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise Matrix2dFromSliceVecsError([len(row) for row in rows])
        data = [item for row in rows for item in row]
        return cls(width, len(rows), transposed, data)