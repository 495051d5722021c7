"""Palette-backed voxel chunk storage."""
from __future__ import annotations

from typing import Iterable, Iterator, Sequence, Tuple

from world.blocks import AIR_BLOCK
from world.coords import (
    CHUNK_VOLUME,
    Vec3i,
    as_vec,
    chunk_origin,
    index_to_local,
    local_to_index,
)
from world.palette import Palette


class Chunk:
    """One full-height column of voxels stored as one-byte palette indices."""

    __slots__ = ("position", "palette", "voxels", "dirty")

    def __init__(self, position: Sequence[int]) -> None:
        self.position = as_vec(position)
        self.palette = Palette()
        self.voxels = bytearray(CHUNK_VOLUME)
        self.dirty = False

    @classmethod
    def from_parts(
        cls,
        position: Sequence[int],
        palette_ids: Iterable[int],
        voxels: bytes,
    ) -> "Chunk":
        """Rebuild a persisted chunk from its palette list and raw voxel bytes."""
        if len(voxels) != CHUNK_VOLUME:
            raise ValueError(f"voxel data must be {CHUNK_VOLUME} bytes, got {len(voxels)}")
        chunk = cls(position)
        chunk.palette = Palette.from_ids(palette_ids)
        chunk.voxels = bytearray(voxels)
        return chunk

    # Block access -------------------------------------------------------
    def get_block(self, local: Sequence[int]) -> int:
        index = local_to_index(local)
        if index is None:
            return AIR_BLOCK
        return self.palette.resolve(self.voxels[index])

    def set_block(self, local: Sequence[int], block_id: int) -> None:
        """Store ``block_id`` at ``local``; out-of-range writes are ignored.

        Raises PaletteOverflowError if ``block_id`` would be the chunk's
        256th distinct block type, and ValueError for ids outside the block
        id range. The chunk is left untouched in both cases.
        """
        index = local_to_index(local)
        if index is None:
            return
        self.voxels[index] = self.palette.add_block(block_id)
        self.dirty = True

    def fill(self, block_id: int) -> None:
        palette = Palette()
        palette_index = palette.add_block(block_id)
        self.palette = palette
        self.voxels = bytearray([palette_index]) * CHUNK_VOLUME
        self.dirty = True

    # Queries ------------------------------------------------------------
    def is_empty(self) -> bool:
        return self.palette.size() == 1 and self.palette.resolve(0) == AIR_BLOCK

    def count_solid_blocks(self) -> int:
        if self.is_empty():
            return 0
        # Indices past the end of the palette read as air, so count solid ones.
        return sum(
            self.voxels.count(index)
            for index, block_id in self.palette.items()
            if block_id != AIR_BLOCK
        )

    def iterate_blocks(self) -> Iterator[Tuple[Vec3i, int]]:
        """Yield ``(local, block_id)`` for every non-air voxel in index order."""
        resolve = self.palette.resolve
        for index, palette_index in enumerate(self.voxels):
            block_id = resolve(palette_index)
            if block_id != AIR_BLOCK:
                yield index_to_local(index), block_id

    def world_origin(self) -> Vec3i:
        return chunk_origin(self.position)

    def voxel_bytes(self) -> bytes:
        return bytes(self.voxels)

    # Dirty tracking -----------------------------------------------------
    def mark_clean(self) -> None:
        self.dirty = False

    def is_dirty(self) -> bool:
        return self.dirty

    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Chunk):
            return NotImplemented
        return (
            self.position == other.position
            and self.palette == other.palette
            and self.voxels == other.voxels
        )

    def __repr__(self) -> str:
        return f"Chunk(position={tuple(self.position)}, palette={self.palette.size()}, dirty={self.dirty})"
