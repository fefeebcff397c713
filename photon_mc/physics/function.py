"""
Tabulated one-dimensional functions with linear interpolation.

Used for atomic form factors, incoherent scattering functions and mean
free path tables. Lookups never extrapolate: the valid domain is the
half-open interval [x_min, x_max).

File format (whitespace or delimiter separated):
    <skip_header lines>
    x  y1  [y2  y3 ...]
"""

import numpy as np
import numba
from pathlib import Path
from typing import List, Optional, Sequence, Tuple


class DomainError(ValueError):
    """Raised when a tabulated function is evaluated outside its table."""


@numba.njit(fastmath=True, cache=True)
def _linear_interpolate(x_array: np.ndarray, y_array: np.ndarray, x: float) -> float:
    """
    Binary search + linear interpolation.

    The caller guarantees x_array[0] <= x < x_array[-1].

    Parameters:
        x_array: Sorted array of x values
        y_array: Corresponding y values
        x: Point to interpolate

    Returns:
        Interpolated y value
    """
    # First index with x_array[ir] > x
    ir = np.searchsorted(x_array, x, side='right')

    x0 = x_array[ir - 1]
    x1 = x_array[ir]
    y0 = y_array[ir - 1]
    y1 = y_array[ir]

    slope = (y1 - y0) / (x1 - x0)
    return (x - x0) * slope + y0


class TabulatedFunction:
    """
    Piecewise-linear function defined by sorted (x, y) pairs.

    Usage:
        f = TabulatedFunction([0.0, 1.0, 2.0], [1.0, 0.5, 0.2])
        f(0.5)          # 0.75
        f.domain()      # (0.0, 2.0)
        f(2.0)          # raises DomainError
    """

    def __init__(self, x: Sequence[float] = (), y: Sequence[float] = ()):
        """
        Initialize from data arrays.

        Parameters:
            x: Abscissae, sorted ascending
            y: Ordinates, same length as x

        Raises:
            ValueError: If data is unsorted, non-finite or mismatched
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        if x.shape != y.shape or x.ndim != 1:
            raise ValueError(f"x and y must be 1D arrays of equal length, "
                             f"got shapes {x.shape} and {y.shape}")
        if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
            raise ValueError("Tabulated data contains non-finite numbers")
        if np.any(np.diff(x) < 0):
            raise ValueError("Tabulated x data must be sorted ascending")

        self.xdata = x
        self.ydata = y

    # ------------------------------------------------------------------
    # Construction from files
    # ------------------------------------------------------------------

    @staticmethod
    def _load_columns(path, delimiter: Optional[str], skip_header: int) -> np.ndarray:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Data table not found: {path}")
        data = np.loadtxt(path, delimiter=delimiter, skiprows=skip_header, ndmin=2)
        if data.shape[1] < 2:
            raise ValueError(f"{path.name}: need at least two columns, got {data.shape[1]}")
        return data

    @classmethod
    def from_file(cls, path, delimiter: Optional[str] = None,
                  skip_header: int = 2) -> "TabulatedFunction":
        """
        Load a two-column table.

        Parameters:
            path: Table file
            delimiter: Column delimiter (None = any whitespace)
            skip_header: Number of header lines to skip

        Returns:
            TabulatedFunction built from the first two columns
        """
        data = cls._load_columns(path, delimiter, skip_header)
        return cls(data[:, 0], data[:, 1])

    @classmethod
    def multiple_from_file(cls, path, delimiter: Optional[str] = None,
                           skip_header: int = 2) -> List["TabulatedFunction"]:
        """
        Load a table with one x column and several y columns.

        Returns:
            One TabulatedFunction per y column, in file order
        """
        data = cls._load_columns(path, delimiter, skip_header)
        return [cls(data[:, 0], data[:, j]) for j in range(1, data.shape[1])]

    # ------------------------------------------------------------------
    # Incremental construction
    # ------------------------------------------------------------------

    def push(self, point: Tuple[float, float]):
        """Append (x, y); x must not be smaller than the last x."""
        x, y = float(point[0]), float(point[1])
        if not (np.isfinite(x) and np.isfinite(y)):
            raise ValueError("Attempted to add non-finite number")
        if len(self.xdata) > 0 and self.xdata[-1] > x:
            raise ValueError("Attempted to build unsorted function")
        self.xdata = np.append(self.xdata, x)
        self.ydata = np.append(self.ydata, y)

    def insert(self, x: float, y: float):
        """Insert (x, y) at its sorted position; x must be new."""
        x, y = float(x), float(y)
        if not (np.isfinite(x) and np.isfinite(y)):
            raise ValueError("Attempted to add non-finite number")
        index = int(np.searchsorted(self.xdata, x, side='right'))
        if index > 0 and self.xdata[index - 1] == x:
            raise ValueError(f"Attempted to add x = {x} twice")
        self.xdata = np.insert(self.xdata, index, x)
        self.ydata = np.insert(self.ydata, index, y)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def domain(self) -> Tuple[float, float]:
        """Half-open interval [x_min, x_max) on which the function is defined."""
        if len(self.xdata) < 2:
            raise DomainError("Function needs at least two points to be evaluated")
        return float(self.xdata[0]), float(self.xdata[-1])

    def call(self, x: float) -> float:
        """
        Evaluate by linear interpolation.

        Raises:
            DomainError: If x is outside [x_min, x_max)
        """
        x_min, x_max = self.domain()
        if not (x_min <= x < x_max):
            raise DomainError(f"x = {x} outside of tabulated domain [{x_min}, {x_max})")
        return float(_linear_interpolate(self.xdata, self.ydata, float(x)))

    __call__ = call

    def max(self) -> float:
        """Global maximum of the tabulated y values."""
        if len(self.ydata) == 0:
            raise ValueError("Empty function has no maximum")
        return float(np.max(self.ydata))

    def __len__(self) -> int:
        return len(self.xdata)

    def __repr__(self) -> str:
        if len(self.xdata) == 0:
            return "TabulatedFunction(empty)"
        return (f"TabulatedFunction(n={len(self.xdata)}, "
                f"x=[{self.xdata[0]:.4g}, {self.xdata[-1]:.4g}))")
