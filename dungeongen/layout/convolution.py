"""Kernel convolution over cost fields.

Two anchoring conventions are supported:

* ``TOP_LEFT``: the kernel's first cell sits on the output cell, so an all-ones
  kernel the size of a room sums the field over the footprint that room would
  cover if its top-left corner were placed there.
* ``CENTER``: the kernel's middle cell sits on the output cell; used for local
  smoothing with small odd square kernels.

Taps that fall outside the field contribute nothing. Padding surrounds the
kernel with ``pad_value`` so a footprint also weighs the ring of cells around
it.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from .tiles import AnchorMode

KernelLike = Union[np.ndarray, Sequence[Sequence[float]]]

HALLWAY_KERNEL = np.array(
    [
        [1 / 8, 2 / 8, 1 / 8],
        [2 / 8, 8 / 8, 2 / 8],
        [1 / 8, 2 / 8, 1 / 8],
    ]
)


def room_kernel(height: int, width: int) -> np.ndarray:
    return np.ones((height, width), dtype=float)


def pad_kernel(kernel: KernelLike, pad_amount: int, pad_value: float = 1.0) -> np.ndarray:
    arr = np.asarray(kernel, dtype=float)
    if pad_amount <= 0:
        return arr.copy()
    return np.pad(arr, pad_amount, mode="constant", constant_values=pad_value)


def convolve(
    field: np.ndarray,
    kernel: KernelLike,
    anchor: AnchorMode = AnchorMode.TOP_LEFT,
    pad_amount: int = 0,
    pad_value: float = 1.0,
) -> np.ndarray:
    """Return a new field where each cell is the kernel-weighted sum around it.

    Raises ``ValueError`` when ``CENTER`` anchoring is asked of a kernel that
    is not square with an odd side.
    """
    field = np.asarray(field, dtype=float)
    raw = np.asarray(kernel, dtype=float)
    if raw.ndim != 2 or raw.size == 0:
        raise ValueError(f"kernel must be a non-empty 2D matrix, got shape {raw.shape}")
    if anchor is AnchorMode.CENTER and (raw.shape[0] != raw.shape[1] or raw.shape[0] % 2 == 0):
        raise ValueError(f"center anchoring needs an odd square kernel, got shape {raw.shape}")

    padded = pad_kernel(raw, pad_amount, pad_value)
    if anchor is AnchorMode.CENTER:
        origin_x, origin_y = padded.shape[0] // 2, padded.shape[1] // 2
    else:
        origin_x = origin_y = max(pad_amount, 0)

    height, width = field.shape
    out = np.zeros_like(field)
    for kx in range(padded.shape[0]):
        dx = kx - origin_x
        x_lo, x_hi = max(0, -dx), min(height, height - dx)
        if x_lo >= x_hi:
            continue
        for ky in range(padded.shape[1]):
            weight = padded[kx, ky]
            if weight == 0:
                continue
            dy = ky - origin_y
            y_lo, y_hi = max(0, -dy), min(width, width - dy)
            if y_lo >= y_hi:
                continue
            out[x_lo:x_hi, y_lo:y_hi] += weight * field[x_lo + dx : x_hi + dx, y_lo + dy : y_hi + dy]
    return out


__all__ = ["HALLWAY_KERNEL", "room_kernel", "pad_kernel", "convolve"]
