"""Seeded gradient-noise fields.

Each lattice corner picks its gradient from an integer hash of the corner
and the seed, so a field is fully determined by its 32-bit seed and needs
no permutation table. Noise is exactly 0 on integer lattice points.

Inputs may be scalars or NumPy arrays; arrays broadcast against each other
and produce an array of the same shape.
"""
from __future__ import annotations

from typing import Union

import numpy as np

SEED_MODULUS = 1 << 32

# Lattice hash multipliers, one per axis plus the seed.
_X_GEN = 1619
_Y_GEN = 31337
_Z_GEN = 6971
_SEED_GEN = 1013
_SHIFT = 8

_GRADIENTS2 = np.array([[0, 1], [0, -1], [1, 0], [-1, 0]], dtype=np.float64)
_GRADIENTS3 = np.array(
    [
        [1, 1, 0], [-1, 1, 0], [1, -1, 0], [-1, -1, 0],
        [1, 0, 1], [-1, 0, 1], [1, 0, -1], [-1, 0, -1],
        [0, 1, 1], [0, -1, 1], [0, 1, -1], [0, -1, -1],
    ],
    dtype=np.float64,
)

Sample = Union[float, np.ndarray]


def wrap_seed(seed: int) -> int:
    return int(seed) % SEED_MODULUS


def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(a, b, t):
    return a + t * (b - a)


def _lattice_hash(seed: int, ix, iy, iz=0):
    """Hash a lattice corner to a byte."""
    n = (_X_GEN * ix + _Y_GEN * iy + _Z_GEN * iz + _SEED_GEN * seed) & 0xFFFFFFFF
    return (n ^ (n >> _SHIFT)) & 0xFF


def _split(coord):
    base = np.floor(coord)
    return base.astype(np.int64), coord - base


def _gradient2(seed, ix, iy, fx, fy):
    g = _GRADIENTS2[_lattice_hash(seed, ix, iy) % len(_GRADIENTS2)]
    return g[..., 0] * fx + g[..., 1] * fy


def _gradient3(seed, ix, iy, iz, fx, fy, fz):
    g = _GRADIENTS3[_lattice_hash(seed, ix, iy, iz) % len(_GRADIENTS3)]
    return g[..., 0] * fx + g[..., 1] * fy + g[..., 2] * fz


def perlin2(seed: int, x, y):
    ix, fx = _split(np.asarray(x, dtype=np.float64))
    iy, fy = _split(np.asarray(y, dtype=np.float64))
    u = _fade(fx)
    v = _fade(fy)

    n00 = _gradient2(seed, ix, iy, fx, fy)
    n10 = _gradient2(seed, ix + 1, iy, fx - 1.0, fy)
    n01 = _gradient2(seed, ix, iy + 1, fx, fy - 1.0)
    n11 = _gradient2(seed, ix + 1, iy + 1, fx - 1.0, fy - 1.0)

    return _lerp(_lerp(n00, n10, u), _lerp(n01, n11, u), v)


def perlin3(seed: int, x, y, z):
    ix, fx = _split(np.asarray(x, dtype=np.float64))
    iy, fy = _split(np.asarray(y, dtype=np.float64))
    iz, fz = _split(np.asarray(z, dtype=np.float64))
    u = _fade(fx)
    v = _fade(fy)
    w = _fade(fz)

    n000 = _gradient3(seed, ix, iy, iz, fx, fy, fz)
    n100 = _gradient3(seed, ix + 1, iy, iz, fx - 1.0, fy, fz)
    n010 = _gradient3(seed, ix, iy + 1, iz, fx, fy - 1.0, fz)
    n110 = _gradient3(seed, ix + 1, iy + 1, iz, fx - 1.0, fy - 1.0, fz)
    n001 = _gradient3(seed, ix, iy, iz + 1, fx, fy, fz - 1.0)
    n101 = _gradient3(seed, ix + 1, iy, iz + 1, fx - 1.0, fy, fz - 1.0)
    n011 = _gradient3(seed, ix, iy + 1, iz + 1, fx, fy - 1.0, fz - 1.0)
    n111 = _gradient3(seed, ix + 1, iy + 1, iz + 1, fx - 1.0, fy - 1.0, fz - 1.0)

    near = _lerp(_lerp(n000, n100, u), _lerp(n010, n110, u), v)
    far = _lerp(_lerp(n001, n101, u), _lerp(n011, n111, u), v)
    return _lerp(near, far, w)


def _clamp_unit(values) -> Sample:
    values = np.clip(values, -1.0, 1.0)
    if np.ndim(values) == 0:
        return float(values)
    return values


class NoiseField:
    """Deterministic ``(seed, coordinate) -> [-1, 1]`` noise in 2D and 3D.

    Callers scale coordinates by their own frequency before sampling.
    Distinct 32-bit seeds give distinct fields.
    """

    __slots__ = ("seed",)

    def __init__(self, seed: int) -> None:
        self.seed = wrap_seed(seed)

    def sample2(self, x, y) -> Sample:
        return _clamp_unit(perlin2(self.seed, x, y))

    def sample3(self, x, y, z) -> Sample:
        return _clamp_unit(perlin3(self.seed, x, y, z))

    def __repr__(self) -> str:
        return f"NoiseField(seed={self.seed})"
