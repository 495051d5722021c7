"""Exceptions raised by the world data core."""
from __future__ import annotations


class WorldError(Exception):
    """Base class for unrecoverable world-data conditions."""


class PaletteOverflowError(WorldError):
    """A chunk tried to hold more distinct block types than one byte can index."""

    def __init__(self, block_id: int, capacity: int) -> None:
        super().__init__(
            f"Palette overflow: block {block_id} would exceed {capacity} distinct blocks in chunk"
        )
        self.block_id = block_id
        self.capacity = capacity
