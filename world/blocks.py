"""Block definitions and the registry mapping ids to them."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

AIR_BLOCK = 0
MAX_BLOCK_ID = 0xFFFF


class BlockKind(Enum):
    AIR = "air"
    SOLID = "solid"

    @property
    def is_solid(self) -> bool:
        return self is BlockKind.SOLID


@dataclass(frozen=True)
class BlockDef:
    id: int
    name: str
    kind: BlockKind = BlockKind.SOLID
    texture_id: int = 0

    def __post_init__(self) -> None:
        if not 0 <= int(self.id) <= MAX_BLOCK_ID:
            raise ValueError(f"block id {self.id} is outside the 16-bit range")
        if not self.name:
            raise ValueError("block name must be non-empty")

    @property
    def is_solid(self) -> bool:
        return self.kind.is_solid


BUILTIN_BLOCKS = (
    BlockDef(AIR_BLOCK, "air", BlockKind.AIR, 0),
    BlockDef(1, "stone", BlockKind.SOLID, 1),
    BlockDef(2, "dirt", BlockKind.SOLID, 2),
    BlockDef(3, "grass", BlockKind.SOLID, 3),
    BlockDef(4, "wood", BlockKind.SOLID, 4),
)


class BlockRegistry:
    """Bidirectional id/name catalog of block definitions.

    Lookups are total: an id without a definition behaves as air, so chunk
    data written by a newer block set still renders instead of failing.
    """

    def __init__(self, blocks: Optional[Iterable[BlockDef]] = None) -> None:
        self._blocks: Dict[int, BlockDef] = {}
        self._name_to_id: Dict[str, int] = {}
        for block in BUILTIN_BLOCKS:
            self.register(block)
        if blocks is not None:
            for block in blocks:
                self.register(block)

    # ------------------------------------------------------------------
    def register(self, block: BlockDef) -> None:
        """Insert ``block``, replacing any definition that shares its id."""
        owner = self._name_to_id.get(block.name)
        if owner is not None and owner != block.id:
            raise ValueError(f"block name '{block.name}' is already registered to id {owner}")
        previous = self._blocks.get(block.id)
        if previous is not None and previous.name != block.name:
            self._name_to_id.pop(previous.name, None)
        self._blocks[block.id] = block
        self._name_to_id[block.name] = block.id

    def get(self, block_id: int) -> Optional[BlockDef]:
        return self._blocks.get(block_id)

    def get_by_name(self, name: str) -> Optional[BlockDef]:
        block_id = self._name_to_id.get(name)
        if block_id is None:
            return None
        return self._blocks.get(block_id)

    def get_kind(self, block_id: int) -> BlockKind:
        block = self._blocks.get(block_id)
        # Id 0 stays air even if a content pack re-registers it.
        if block is None or block_id == AIR_BLOCK:
            return BlockKind.AIR
        return block.kind

    def is_solid(self, block_id: int) -> bool:
        return self.get_kind(block_id).is_solid

    def is_air(self, block_id: int) -> bool:
        return block_id == AIR_BLOCK or self.get_kind(block_id) is BlockKind.AIR

    def names(self) -> List[str]:
        return list(self._name_to_id)

    def iterate(self) -> Iterator[BlockDef]:
        return iter(list(self._blocks.values()))

    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[BlockDef]:
        return self.iterate()

    def __len__(self) -> int:
        return len(self._blocks)

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._blocks


def block_def_from_dict(entry: Mapping[str, Any]) -> BlockDef:
    """Build a BlockDef from a content-pack entry (``{id, name, kind, texture_id}``)."""
    if not isinstance(entry, Mapping):
        raise TypeError("Block entry must be a JSON object/dict")
    try:
        block_id = int(entry["id"])
        name = str(entry["name"])
    except KeyError as exc:
        raise ValueError(f"Block entry is missing required field {exc}") from exc
    kind_raw = str(entry.get("kind", BlockKind.SOLID.value)).strip().lower()
    try:
        kind = BlockKind(kind_raw)
    except ValueError as exc:
        raise ValueError(f"Unknown block kind '{kind_raw}' for block '{name}'") from exc
    texture_id = int(entry.get("texture_id", block_id))
    return BlockDef(block_id, name, kind, texture_id)


def load_block_defs(registry: BlockRegistry, entries: Iterable[Mapping[str, Any]]) -> List[BlockDef]:
    """Register every entry with ``registry`` and return the definitions added."""
    added = [block_def_from_dict(entry) for entry in entries]
    for block in added:
        registry.register(block)
    return added
