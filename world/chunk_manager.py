"""Keyed collection of loaded chunks with world-coordinate block access."""
from __future__ import annotations

import threading
from typing import Dict, Iterator, List, Optional, Sequence

from world.blocks import AIR_BLOCK
from world.chunks import Chunk
from world.coords import Vec3i, as_vec, world_to_chunk, world_to_local


class ChunkManager:
    """Owns every loaded chunk; at most one chunk per coordinate.

    All map access happens under one re-entrant lock so lazy creation is
    atomic per coordinate when several threads share the manager. The
    manager performs no I/O: evicting a dirty chunk discards its edits unless
    the caller flushed it first.
    """

    def __init__(self) -> None:
        self._chunks: Dict[Vec3i, Chunk] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    def get_or_create(self, chunk_pos: Sequence[int]) -> Chunk:
        key = as_vec(chunk_pos)
        with self._lock:
            chunk = self._chunks.get(key)
            if chunk is None:
                chunk = Chunk(key)
                self._chunks[key] = chunk
            return chunk

    def get(self, chunk_pos: Sequence[int]) -> Optional[Chunk]:
        with self._lock:
            return self._chunks.get(as_vec(chunk_pos))

    def insert(self, chunk: Chunk) -> None:
        """Store ``chunk`` under its own position, replacing any previous one."""
        with self._lock:
            self._chunks[chunk.position] = chunk

    def insert_if_absent(self, chunk: Chunk) -> bool:
        with self._lock:
            if chunk.position in self._chunks:
                return False
            self._chunks[chunk.position] = chunk
            return True

    def remove(self, chunk_pos: Sequence[int]) -> Optional[Chunk]:
        with self._lock:
            return self._chunks.pop(as_vec(chunk_pos), None)

    # World-coordinate access -------------------------------------------
    def get_block(self, world_pos: Sequence[int]) -> int:
        """Block at ``world_pos``; unloaded chunks read as air and stay unloaded."""
        chunk = self.get(world_to_chunk(world_pos))
        if chunk is None:
            return AIR_BLOCK
        return chunk.get_block(world_to_local(world_pos))

    def set_block(self, world_pos: Sequence[int], block_id: int) -> None:
        local = world_to_local(world_pos)
        with self._lock:
            chunk = self.get_or_create(world_to_chunk(world_pos))
            chunk.set_block(local, block_id)

    # Views --------------------------------------------------------------
    def loaded_chunks(self) -> List[Vec3i]:
        with self._lock:
            return list(self._chunks.keys())

    def dirty_chunks(self) -> List[Chunk]:
        with self._lock:
            return [chunk for chunk in self._chunks.values() if chunk.is_dirty()]

    def chunk_count(self) -> int:
        with self._lock:
            return len(self._chunks)

    # Eviction -----------------------------------------------------------
    def unload_distant_chunks(self, center: Sequence[int], max_radius: int) -> List[Vec3i]:
        """Drop chunks farther than ``max_radius`` from ``center`` on the x/z plane."""
        cx, _, cz = as_vec(center)
        max_sq = int(max_radius) * int(max_radius)
        with self._lock:
            evicted = [
                key
                for key in self._chunks
                if (key.x - cx) ** 2 + (key.z - cz) ** 2 > max_sq
            ]
            for key in evicted:
                del self._chunks[key]
            remaining = len(self._chunks)
        if evicted:
            print(f"[world] unloaded {len(evicted)} chunks; {remaining} loaded")
        return evicted

    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return self.chunk_count()

    def __contains__(self, chunk_pos: object) -> bool:
        try:
            key = as_vec(chunk_pos)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False
        with self._lock:
            return key in self._chunks

    def __iter__(self) -> Iterator[Chunk]:
        with self._lock:
            return iter(list(self._chunks.values()))
