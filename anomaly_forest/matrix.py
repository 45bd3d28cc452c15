"""
This module contains the Matrix class, the rectangular container of numeric
feature rows consumed by the isolation forest.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator

import numpy as np
import numpy.typing as npt

from .errors import EmptyInput, IndexOutOfRange, ShapeMismatch


class Matrix:
    """
    Ordered, rectangular container of float64 rows.
    Attributes:
        values: Read-only view of the underlying array of shape (nrows, ncols).
    """

    def __init__(self, rows: Any) -> None:
        """
        Args:
            rows: Anything numpy can turn into a 2-D float array
                (list of rows, ndarray, another Matrix).
        Raises:
            ShapeMismatch: rows are ragged or non numeric, the input is not
                2-D, or it has zero columns.
            EmptyInput: an empty sequence was given, so there are no rows to
                take a column count from.
        """
        if isinstance(rows, Matrix):
            rows = rows._data
        try:
            data = np.array(rows, dtype=np.float64)
        except (ValueError, TypeError) as exc:
            raise ShapeMismatch(f"rows must be numeric and of equal length: {exc}") from exc

        if data.ndim == 1 and data.size == 0:
            raise EmptyInput("no rows given")
        if data.ndim != 2:
            raise ShapeMismatch(f"expected a 2-D matrix, got {data.ndim} dimension(s)")
        if data.shape[1] == 0:
            raise ShapeMismatch("a matrix needs at least one column")

        self._data = data
        self._data.flags.writeable = False

    @classmethod
    def empty(cls, ncols: int) -> Matrix:
        """Create a matrix with zero rows and `ncols` columns."""
        return cls(np.zeros((0, ncols), dtype=np.float64))

    @property
    def values(self) -> npt.NDArray[np.float64]:
        return self._data

    @property
    def nrows(self) -> int:
        return int(self._data.shape[0])

    @property
    def ncols(self) -> int:
        return int(self._data.shape[1])

    @property
    def shape(self) -> tuple[int, int]:
        return self.nrows, self.ncols

    def row(self, i: int) -> npt.NDArray[np.float64]:
        if not -self.nrows <= i < self.nrows:
            raise IndexOutOfRange(f"row {i} out of range for {self.nrows} rows")
        return self._data[i]

    def column(self, j: int) -> npt.NDArray[np.float64]:
        if not -self.ncols <= j < self.ncols:
            raise IndexOutOfRange(f"column {j} out of range for {self.ncols} columns")
        return self._data[:, j]

    def push_row(self, row: Iterable[float]) -> None:
        """
        Append one row at the end of the matrix.
        Raises:
            ShapeMismatch: the row length differs from ncols.
        """
        new_row = np.asarray(list(row), dtype=np.float64)
        if new_row.shape != (self.ncols,):
            raise ShapeMismatch(
                f"row of length {new_row.size} does not fit a matrix with {self.ncols} columns"
            )
        data = np.vstack([self._data, new_row[np.newaxis, :]])
        data.flags.writeable = False
        self._data = data

    def take(self, indices: npt.ArrayLike) -> Matrix:
        """
        Materialize the submatrix made of the given rows, in the given order.
        Indices may repeat (bootstrap sampling).
        """
        idx = np.asarray(indices, dtype=np.intp)
        if idx.size and (idx.min() < 0 or idx.max() >= self.nrows):
            raise IndexOutOfRange(f"row indices must lie in [0, {self.nrows})")
        return Matrix(self._data[idx].reshape(-1, self.ncols))

    def __len__(self) -> int:
        return self.nrows

    def __iter__(self) -> Iterator[npt.NDArray[np.float64]]:
        return iter(self._data)

    def __repr__(self) -> str:
        return f"Matrix(nrows={self.nrows}, ncols={self.ncols})"


def as_matrix(x: Any) -> Matrix:
    """Return `x` unchanged if it already is a Matrix, otherwise wrap it."""
    if isinstance(x, Matrix):
        return x
    return Matrix(x)
