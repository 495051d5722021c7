"""Per-chunk palette compressing block ids into one-byte voxel indices."""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from world.blocks import AIR_BLOCK, MAX_BLOCK_ID
from world.errors import PaletteOverflowError

PALETTE_CAPACITY = 255


class Palette:
    """Append-only list of block ids; index 0 is always air."""

    __slots__ = ("_ids", "_index")

    def __init__(self) -> None:
        self._ids: List[int] = [AIR_BLOCK]
        self._index: Dict[int, int] = {AIR_BLOCK: 0}

    @classmethod
    def from_ids(cls, ids: Iterable[int]) -> "Palette":
        """Rebuild a palette from its serialized, ordered id list."""
        ordered = [int(block_id) for block_id in ids]
        if not ordered or ordered[0] != AIR_BLOCK:
            raise ValueError("palette must start with air at index 0")
        if len(set(ordered)) != len(ordered):
            raise ValueError("palette contains duplicate block ids")
        palette = cls()
        for block_id in ordered[1:]:
            palette.add_block(block_id)
        return palette

    # API ----------------------------------------------------------------
    def add_block(self, block_id: int) -> int:
        """Return the index for ``block_id``, appending it when new.

        Raises ValueError for ids outside the 16-bit block id range.
        """
        if not 0 <= block_id <= MAX_BLOCK_ID:
            raise ValueError(f"block id {block_id} outside 0..{MAX_BLOCK_ID}")
        existing = self._index.get(block_id)
        if existing is not None:
            return existing
        if len(self._ids) >= PALETTE_CAPACITY:
            raise PaletteOverflowError(block_id, PALETTE_CAPACITY)
        index = len(self._ids)
        self._ids.append(block_id)
        self._index[block_id] = index
        return index

    def resolve(self, index: int) -> int:
        # Corrupt indices read as air.
        if 0 <= index < len(self._ids):
            return self._ids[index]
        return AIR_BLOCK

    def index_of(self, block_id: int) -> Optional[int]:
        return self._index.get(block_id)

    def size(self) -> int:
        return len(self._ids)

    def is_full(self) -> bool:
        return len(self._ids) >= PALETTE_CAPACITY

    def ids(self) -> List[int]:
        return list(self._ids)

    def items(self) -> Iterator[Tuple[int, int]]:
        """Yield ``(index, block_id)`` pairs in insertion order."""
        return enumerate(list(self._ids))

    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._index

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        return self.items()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Palette):
            return NotImplemented
        return self._ids == other._ids

    def __repr__(self) -> str:
        return f"Palette({self._ids!r})"
