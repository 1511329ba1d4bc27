"""One-dimensional interpolation over a fixed set of knots.

Two kinds are supported: piecewise-linear ("linear") and natural cubic spline
("cubic"). Outside the knot range both return the boundary knot value. An
Interpolator can be written to and read back from a RestartFile; rebuilding
from the stored knots gives bit-identical evaluations.
"""

from typing import Sequence, Union

import numpy as np
from scipy import interpolate

from .error_handling import ConfigurationError, RestoreFormatError

KINDS = {"linear": 0, "cubic": 1}
_KIND_NAMES = {code: name for name, code in KINDS.items()}
_HEADER_DTYPE = np.dtype("<u8")
_KNOT_DTYPE = np.dtype("<f8")


class Interpolator(object):
    """
    Interpolates tabulated (x, y) knots.

    Attributes
    ----------
    kind: str
        Either "linear" or "cubic" (natural boundary conditions).
    xs: np.ndarray
        The strictly increasing knot abscissae.
    ys: np.ndarray
        The knot values.
    """

    def __init__(self, kind: str, xs: Sequence[float], ys: Sequence[float]):
        if kind not in KINDS:
            raise ConfigurationError(
                f"Unknown interpolation kind '{kind}'. Must be one of {list(KINDS.keys())}"
            )
        xs = np.array(xs, dtype=float)
        ys = np.array(ys, dtype=float)
        if xs.ndim != 1 or xs.shape != ys.shape:
            raise ConfigurationError(
                f"Knot arrays must be one-dimensional and of equal length, "
                f"got {xs.shape} and {ys.shape}"
            )
        min_knots = 3 if kind == "cubic" else 2
        if len(xs) < min_knots:
            raise ConfigurationError(
                f"A {kind} interpolator needs at least {min_knots} knots, got {len(xs)}"
            )
        if not (np.isfinite(xs).all() and np.isfinite(ys).all()):
            raise ConfigurationError("Knot arrays contain non-finite values")
        if not (np.diff(xs) > 0.0).all():
            raise ConfigurationError("Knot abscissae must be strictly increasing")

        self.kind = kind
        self.xs = xs
        self.ys = ys
        self.xs.setflags(write=False)
        self.ys.setflags(write=False)
        if kind == "cubic":
            self._spline = interpolate.CubicSpline(xs, ys, bc_type="natural", extrapolate=False)
        else:
            self._spline = None

    def __len__(self) -> int:
        return len(self.xs)

    def __call__(self, x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        return self.eval(x)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Interpolator):
            return NotImplemented
        return (
            self.kind == other.kind
            and np.array_equal(self.xs, other.xs)
            and np.array_equal(self.ys, other.ys)
        )

    def __repr__(self) -> str:
        return (
            f"Interpolator(kind={self.kind!r}, knots={len(self)}, "
            f"x=[{self.xs[0]}, {self.xs[-1]}])"
        )

    def eval(self, x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """Evaluate the interpolant, clamping to the boundary values outside the knots."""
        x_arr = np.asarray(x, dtype=float)
        if self.kind == "linear":
            # np.interp returns the exact knot value at a knot
            result = np.interp(x_arr, self.xs, self.ys)
        else:
            result = self._spline(np.clip(x_arr, self.xs[0], self.xs[-1]))
            result = np.where(x_arr <= self.xs[0], self.ys[0], result)
            result = np.where(x_arr >= self.xs[-1], self.ys[-1], result)
        if np.ndim(result) == 0:
            return float(result)
        return result

    def to_bytes(self) -> bytes:
        """Serialise the knots: [kind, n] as uint64, then xs and ys as float64."""
        header = np.array([KINDS[self.kind], len(self.xs)], dtype=_HEADER_DTYPE)
        return (
            header.tobytes()
            + self.xs.astype(_KNOT_DTYPE).tobytes()
            + self.ys.astype(_KNOT_DTYPE).tobytes()
        )

    @classmethod
    def from_bytes(cls, blob: bytes) -> "Interpolator":
        header_size = 2 * _HEADER_DTYPE.itemsize
        if len(blob) < header_size:
            raise RestoreFormatError(
                f"Interpolator blob is too short ({len(blob)} bytes) to hold a header"
            )
        code, n = np.frombuffer(blob[:header_size], dtype=_HEADER_DTYPE)
        if int(code) not in _KIND_NAMES:
            raise RestoreFormatError(f"Unknown interpolation kind code {int(code)}")
        expected = header_size + 2 * int(n) * _KNOT_DTYPE.itemsize
        if len(blob) != expected:
            raise RestoreFormatError(
                f"Interpolator blob holds {len(blob)} bytes, expected {expected} for {int(n)} knots"
            )
        knots = np.frombuffer(blob[header_size:], dtype=_KNOT_DTYPE).reshape(2, int(n))
        try:
            return cls(_KIND_NAMES[int(code)], knots[0], knots[1])
        except ConfigurationError as err:
            raise RestoreFormatError(f"Invalid interpolator knots: {err.message}") from err

    def dump(self, rfile) -> None:
        """Write the interpolator to a RestartFile as a single blob."""
        rfile.write_blob(self.to_bytes())

    @classmethod
    def from_restart(cls, rfile) -> "Interpolator":
        """Read an interpolator written with dump()."""
        return cls.from_bytes(rfile.read_blob())
