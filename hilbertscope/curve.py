"""
    Hilbert curve mapping between a linear byte index and a cell of an n x n grid.

    Neighbouring indices land on neighbouring cells, so a file rasterized along
    the curve keeps its sections as compact blobs instead of smearing them over
    rows the way a plain hexdump image does.

    n must be a power of two. Inputs outside 0 <= i < n*n (or 0 <= x, y < n)
    are not checked by the scalar functions; guard them at the call site.
"""
from __future__ import annotations

import numpy as np


def _rotate(n: int, x: int, y: int, rx: int, ry: int) -> tuple[int, int]:
    # rotate/flip a quadrant so the sub-curve has the right orientation
    if ry == 0:
        if rx == 1:
            x = n - 1 - x
            y = n - 1 - y
        x, y = y, x
    return x, y


def to_2d(index: int, n: int) -> tuple[int, int]:
    """Return the (x, y) cell visited at position `index` of the curve."""
    x = y = 0
    t = index
    s = 1
    while s < n:
        rx = 1 & (t // 2)
        ry = 1 & (t ^ rx)
        x, y = _rotate(s, x, y, rx, ry)
        x += s * rx
        y += s * ry
        t //= 4
        s *= 2
    return x, y


def to_1d(x: int, y: int, n: int) -> int:
    """Inverse of to_2d: the curve position of cell (x, y)."""
    index = 0
    s = n // 2
    while s > 0:
        rx = 1 if (x & s) else 0
        ry = 1 if (y & s) else 0
        index += s * s * ((3 * rx) ^ ry)
        x, y = _rotate(n, x, y, rx, ry)
        s //= 2
    return index


def curve_order(length: int) -> int:
    """ceil(log2(length) / 2), computed on integers; 0 for lengths 0 and 1."""
    if length <= 1:
        return 0
    return ((length - 1).bit_length() + 1) // 2


def side_length(length: int) -> int:
    """Smallest power-of-two side n with n*n >= length."""
    return 1 << curve_order(length)


def curve_coordinates(count: int, n: int) -> tuple[np.ndarray, np.ndarray]:
    """
    Vectorised to_2d for the indices 0..count-1.
    Returns two int64 arrays (xs, ys) so a grid can be filled with grid[ys, xs] = data.
    """
    if count > n * n:
        raise ValueError(f"{count} cells do not fit a {n}x{n} grid.")
    t = np.arange(count, dtype=np.int64)
    x = np.zeros(count, dtype=np.int64)
    y = np.zeros(count, dtype=np.int64)
    s = 1
    while s < n:
        rx = 1 & (t // 2)
        ry = 1 & (t ^ rx)
        flip = (ry == 0) & (rx == 1)
        x = np.where(flip, s - 1 - x, x)
        y = np.where(flip, s - 1 - y, y)
        swap = ry == 0
        x, y = np.where(swap, y, x), np.where(swap, x, y)
        x += s * rx
        y += s * ry
        t //= 4
        s *= 2
    return x, y
