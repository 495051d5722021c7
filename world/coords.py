"""Coordinate conversions between world, chunk and chunk-local space."""
from __future__ import annotations

from typing import Iterator, NamedTuple, Optional, Sequence, Tuple

CHUNK_SIZE = 16
CHUNK_HEIGHT = 256
CHUNK_VOLUME = CHUNK_SIZE * CHUNK_SIZE * CHUNK_HEIGHT


class Vec3i(NamedTuple):
    x: int
    y: int
    z: int

    def __add__(self, other: Sequence[int]) -> "Vec3i":  # type: ignore[override]
        return Vec3i(self.x + other[0], self.y + other[1], self.z + other[2])

    def __sub__(self, other: Sequence[int]) -> "Vec3i":
        return Vec3i(self.x - other[0], self.y - other[1], self.z - other[2])


ZERO = Vec3i(0, 0, 0)

FACE_DIRECTIONS: Tuple[Vec3i, ...] = (
    Vec3i(1, 0, 0),
    Vec3i(-1, 0, 0),
    Vec3i(0, 1, 0),
    Vec3i(0, -1, 0),
    Vec3i(0, 0, 1),
    Vec3i(0, 0, -1),
)


def as_vec(pos: Sequence[int]) -> Vec3i:
    if isinstance(pos, Vec3i):
        return pos
    if len(pos) != 3:
        raise ValueError("coordinates must contain three integers")
    return Vec3i(int(pos[0]), int(pos[1]), int(pos[2]))


def neighbors(pos: Sequence[int]) -> Iterator[Vec3i]:
    """Yield the six face-adjacent neighbors of ``pos``."""
    x, y, z = pos
    for dx, dy, dz in FACE_DIRECTIONS:
        yield Vec3i(x + dx, y + dy, z + dz)


# World <-> chunk ------------------------------------------------------
def world_to_chunk(world: Sequence[int]) -> Vec3i:
    """Chunk owning ``world``. Chunks span the full height so y is always 0."""
    # Python's // floors, so world x=-1 lands in chunk -1 rather than 0.
    return Vec3i(int(world[0]) // CHUNK_SIZE, 0, int(world[2]) // CHUNK_SIZE)


def world_to_local(world: Sequence[int]) -> Vec3i:
    return Vec3i(int(world[0]) % CHUNK_SIZE, int(world[1]), int(world[2]) % CHUNK_SIZE)


def chunk_origin(chunk: Sequence[int]) -> Vec3i:
    return Vec3i(int(chunk[0]) * CHUNK_SIZE, 0, int(chunk[2]) * CHUNK_SIZE)


def chunk_local_to_world(chunk: Sequence[int], local: Sequence[int]) -> Vec3i:
    return Vec3i(
        int(chunk[0]) * CHUNK_SIZE + int(local[0]),
        int(local[1]),
        int(chunk[2]) * CHUNK_SIZE + int(local[2]),
    )


# Local <-> flat index -------------------------------------------------
def in_bounds(local: Sequence[int]) -> bool:
    x, y, z = local
    return 0 <= x < CHUNK_SIZE and 0 <= y < CHUNK_HEIGHT and 0 <= z < CHUNK_SIZE


def local_to_index(local: Sequence[int]) -> Optional[int]:
    """Linearize a local coordinate, or ``None`` when it lies outside the chunk."""
    if not in_bounds(local):
        return None
    x, y, z = local
    return (y * CHUNK_SIZE + z) * CHUNK_SIZE + x


def index_to_local(index: int) -> Optional[Vec3i]:
    if not 0 <= index < CHUNK_VOLUME:
        return None
    y, rest = divmod(index, CHUNK_SIZE * CHUNK_SIZE)
    z, x = divmod(rest, CHUNK_SIZE)
    return Vec3i(x, y, z)
