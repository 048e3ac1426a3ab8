"""Polynomial roots as eigenvalues of the companion matrix.

The matrix is kept in upper Hessenberg form and reduced from the bottom
up with shifted QR steps built out of Givens rotations. Every deflation
gets a bounded number of iterations; when that runs out the remaining
diagonal is reported as-is instead of iterating further.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class RealRoot:
    value: float

    def __complex__(self) -> complex:
        return complex(self.value, 0.0)


@dataclass(frozen=True)
class ComplexPair:
    """``real ± imag·j`` with ``imag > 0``."""

    real: float
    imag: float

    def __complex__(self) -> complex:
        return complex(self.real, self.imag)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.real, self.imag)

    @property
    def angle(self) -> float:
        return math.atan2(self.imag, self.real)


Root = Union[RealRoot, ComplexPair]


@dataclass(frozen=True)
class RootSet:
    roots: tuple[Root, ...]
    converged: bool = True

    def pairs(self) -> tuple[ComplexPair, ...]:
        return tuple(r for r in self.roots if isinstance(r, ComplexPair))

    def as_complex(self) -> NDArray[np.complex128]:
        """Expand to the full list of roots, conjugates included."""

        out: list[complex] = []
        for r in self.roots:
            out.append(complex(r))
            if isinstance(r, ComplexPair):
                out.append(complex(r.real, -r.imag))
        return np.array(out, dtype=np.complex128)


def companion_matrix(coeffs: NDArray[np.floating]) -> NDArray[np.float64]:
    """Upper Hessenberg companion matrix of ``c[0] z^n + ... + c[n]``."""

    c = np.asarray(coeffs, dtype=np.float64).reshape(-1)
    if c.size < 2:
        return np.zeros((0, 0), dtype=np.float64)
    if c[0] == 0:
        raise ValueError("leading coefficient must be non-zero")
    n = c.size - 1
    h = np.zeros((n, n), dtype=np.float64)
    h[0, :] = -c[1:] / c[0]
    if n > 1:
        h[np.arange(1, n), np.arange(n - 1)] = 1.0
    return h


def polynomial_roots(
    coeffs: NDArray[np.floating], max_iter: int = 50, tol: float = 1e-10
) -> RootSet:
    """Roots of the polynomial with coefficients ``coeffs`` (highest power first)."""

    c = np.trim_zeros(np.asarray(coeffs, dtype=np.float64).reshape(-1), "f")
    if c.size == 0:
        return RootSet(())
    stripped = np.trim_zeros(c, "b")
    zeros = tuple(RealRoot(0.0) for _ in range(c.size - stripped.size))
    found = eigenvalues(companion_matrix(stripped), max_iter=max_iter, tol=tol)
    return RootSet(zeros + found.roots, converged=found.converged)


def eigenvalues(
    matrix: NDArray[np.floating], max_iter: int = 50, tol: float = 1e-10
) -> RootSet:
    """Eigenvalues of an upper Hessenberg matrix."""

    h = np.array(matrix, dtype=np.float64)
    if h.ndim != 2 or h.shape[0] != h.shape[1]:
        raise ValueError("matrix must be square")
    found: list[Root] = []
    m = h.shape[0]
    norm = float(np.max(np.abs(h))) if h.size else 0.0

    while m > 0:
        if m == 1:
            found.append(RealRoot(float(h[0, 0])))
            break

        iterations = 0
        while True:
            if _negligible(h, m - 1, tol, norm):
                found.append(RealRoot(float(h[m - 1, m - 1])))
                m -= 1
                break
            if m == 2 or _negligible(h, m - 2, tol, norm):
                found.extend(_block_roots(h, m))
                m -= 2
                break
            if iterations >= max_iter:
                found.extend(RealRoot(float(h[i, i])) for i in range(m))
                return RootSet(tuple(found), converged=False)

            a, b, c, d = h[m - 2, m - 2], h[m - 2, m - 1], h[m - 1, m - 2], h[m - 1, m - 1]
            trace = a + d
            det = a * d - b * c
            if iterations in (10, 20):
                # exceptional shift to break a stalled cycle
                s = abs(h[m - 1, m - 2]) + abs(h[m - 2, m - 3])
                _double_shift_step(h, m, 1.5 * s, s * s)
            elif trace * trace - 4.0 * det < 0:
                _double_shift_step(h, m, trace, det)
            else:
                _single_shift_step(h, m, _wilkinson_shift(a, b, c, d))
            iterations += 1

    return RootSet(tuple(found))


def _negligible(h: NDArray[np.float64], i: int, tol: float, norm: float) -> bool:
    """True when sub-diagonal entry ``h[i, i-1]`` can be treated as zero."""

    scale = abs(h[i - 1, i - 1]) + abs(h[i, i])
    if scale == 0.0:
        scale = norm
    return abs(h[i, i - 1]) <= tol * scale


def _block_roots(h: NDArray[np.float64], m: int) -> list[Root]:
    a, b, c, d = h[m - 2, m - 2], h[m - 2, m - 1], h[m - 1, m - 2], h[m - 1, m - 1]
    trace = a + d
    det = a * d - b * c
    disc = trace * trace - 4.0 * det
    if disc < 0:
        return [ComplexPair(float(trace / 2.0), float(math.sqrt(-disc) / 2.0))]
    root = math.sqrt(disc)
    return [RealRoot(float((trace + root) / 2.0)), RealRoot(float((trace - root) / 2.0))]


def _wilkinson_shift(a: float, b: float, c: float, d: float) -> float:
    """Eigenvalue of the trailing 2x2 block closest to its last diagonal entry."""

    trace = a + d
    disc = trace * trace - 4.0 * (a * d - b * c)
    if disc < 0:
        return trace / 2.0
    root = math.sqrt(disc)
    e1 = (trace + root) / 2.0
    e2 = (trace - root) / 2.0
    return e1 if abs(e1 - d) < abs(e2 - d) else e2


def _givens(a: float, b: float) -> tuple[float, float]:
    r = math.hypot(a, b)
    if r < 1e-300:
        return 1.0, 0.0
    return a / r, b / r


def _rotate(h: NDArray[np.float64], i: int, j: int, c: float, s: float, m: int) -> None:
    """Similarity ``G H G^T`` acting on rows/columns ``i`` and ``j`` of the active block."""

    ri = h[i, :m].copy()
    rj = h[j, :m].copy()
    h[i, :m] = c * ri + s * rj
    h[j, :m] = -s * ri + c * rj
    ci = h[:m, i].copy()
    cj = h[:m, j].copy()
    h[:m, i] = c * ci + s * cj
    h[:m, j] = -s * ci + c * cj


def _single_shift_step(h: NDArray[np.float64], m: int, shift: float) -> None:
    """One explicit QR step ``RQ + shift`` on the leading ``m x m`` block."""

    idx = np.arange(m)
    h[idx, idx] -= shift

    rotations = []
    for i in range(m - 1):
        c, s = _givens(h[i, i], h[i + 1, i])
        ri = h[i, :m].copy()
        rj = h[i + 1, :m].copy()
        h[i, :m] = c * ri + s * rj
        h[i + 1, :m] = -s * ri + c * rj
        h[i + 1, i] = 0.0
        rotations.append((c, s))

    for i, (c, s) in enumerate(rotations):
        ci = h[:m, i].copy()
        cj = h[:m, i + 1].copy()
        h[:m, i] = c * ci + s * cj
        h[:m, i + 1] = -s * ci + c * cj

    h[idx, idx] += shift


def _double_shift_step(h: NDArray[np.float64], m: int, trace: float, det: float) -> None:
    """Implicit step with the conjugate shift pair of the trailing 2x2 block.

    The first column of ``(H - s)(H - conj(s))`` is real; rotating it onto
    ``e1`` creates a bulge that is chased off the bottom of the block.
    """

    x = h[0, 0] * h[0, 0] + h[0, 1] * h[1, 0] - trace * h[0, 0] + det
    y = h[1, 0] * (h[0, 0] + h[1, 1] - trace)
    z = h[1, 0] * h[2, 1]

    for k in range(m - 2):
        c, s = _givens(y, z)
        _rotate(h, k + 1, k + 2, c, s, m)
        y = c * y + s * z
        c, s = _givens(x, y)
        _rotate(h, k, k + 1, c, s, m)
        if k > 0:
            h[k + 1, k - 1] = 0.0
            h[k + 2, k - 1] = 0.0
        x = h[k + 1, k]
        y = h[k + 2, k]
        z = h[k + 3, k] if k + 3 < m else 0.0

    c, s = _givens(x, y)
    _rotate(h, m - 2, m - 1, c, s, m)
    if m > 2:
        h[m - 1, m - 3] = 0.0
