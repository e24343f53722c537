"""Seeded value noise and the fractal heightmap built from it.

Everything operates on whole NumPy arrays of sample coordinates.  The
lattice hash works on ``uint32`` arrays so multiplication and shifts wrap
at 32 bits exactly, which keeps maps bit-identical for a given seed.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

_PRIME_X = 374761393
_PRIME_Y = 668265263
_SEED_MIX = 0x9E3779B9
_MULTIPLIER = 1274126177
_MASK_24 = 0x00FFFFFF
_NORMALIZER = 16777215.0
_UINT32 = 0xFFFFFFFF

PERSISTENCE = 0.5
LACUNARITY = 2.0
MIN_AMPLITUDE = 0.0001


def _as_uint32(values: ArrayLike) -> NDArray[np.uint32]:
    """Reinterpret signed integers as their 32-bit two's complement."""
    return (np.asarray(values, dtype=np.int64) & _UINT32).astype(np.uint32)


def hash_noise(x: ArrayLike, y: ArrayLike, seed: int) -> NDArray[np.float64]:
    """Hash integer lattice coordinates to pseudo-random values in ``[0, 1]``.

    Args:
        x: Integer lattice x coordinates (any shape).
        y: Integer lattice y coordinates (broadcastable with ``x``).
        seed: Map seed; negative seeds wrap like any other 32-bit value.

    Returns:
        Array of floats in ``[0, 1]`` with the broadcast shape of the inputs.
    """
    shape = np.broadcast_shapes(np.shape(x), np.shape(y))
    hx = np.broadcast_to(_as_uint32(x), shape).ravel()
    hy = np.broadcast_to(_as_uint32(y), shape).ravel()
    mix = np.uint32((seed + _SEED_MIX) & _UINT32)

    h = hx * np.uint32(_PRIME_X) + hy * np.uint32(_PRIME_Y)
    h ^= mix + (h << np.uint32(6)) + (h >> np.uint32(2))
    h = (h ^ (h >> np.uint32(13))) * np.uint32(_MULTIPLIER)
    h ^= h >> np.uint32(16)
    values = (h & np.uint32(_MASK_24)).astype(np.float64) / _NORMALIZER
    return values.reshape(shape)


def _smoothstep(t: NDArray[np.float64]) -> NDArray[np.float64]:
    return t * t * (3.0 - 2.0 * t)


def _lerp(
    a: NDArray[np.float64],
    b: NDArray[np.float64],
    t: NDArray[np.float64],
) -> NDArray[np.float64]:
    return a + (b - a) * t


def value_noise(x: ArrayLike, y: ArrayLike, seed: int) -> NDArray[np.float64]:
    """Sample smooth value noise at real-valued coordinates.

    The four surrounding lattice corners are hashed and blended
    bilinearly with smoothstep easing on both axes.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    x0 = np.floor(x)
    y0 = np.floor(y)
    tx = _smoothstep(x - x0)
    ty = _smoothstep(y - y0)

    ix = x0.astype(np.int64)
    iy = y0.astype(np.int64)
    v00 = hash_noise(ix, iy, seed)
    v10 = hash_noise(ix + 1, iy, seed)
    v01 = hash_noise(ix, iy + 1, seed)
    v11 = hash_noise(ix + 1, iy + 1, seed)

    top = _lerp(v00, v10, tx)
    bottom = _lerp(v01, v11, tx)
    return _lerp(top, bottom, ty)


def fractal_heightmap(
    width: int,
    height: int,
    *,
    seed: int,
    scale: float,
    octaves: int,
) -> NDArray[np.float64]:
    """Sum ``octaves`` layers of value noise into a normalised heightmap.

    Each octave halves the amplitude and doubles the frequency.  The sum
    is divided by the total amplitude and clamped to ``[0, 1]``.

    Args:
        width: Number of columns.
        height: Number of rows.
        seed: Noise seed.
        scale: Frequency of the first octave.
        octaves: Number of layers; zero or fewer gives a flat map of 0.

    Returns:
        Array of shape ``(height, width)`` indexed ``[y, x]``.
    """
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    value = np.zeros((height, width), dtype=np.float64)
    frequency = scale
    amplitude = 1.0
    total_amplitude = 0.0

    for _ in range(octaves):
        value += value_noise(xs * frequency, ys * frequency, seed) * amplitude
        total_amplitude += amplitude
        amplitude *= PERSISTENCE
        frequency *= LACUNARITY

    value /= max(total_amplitude, MIN_AMPLITUDE)
    return np.clip(value, 0.0, 1.0)
