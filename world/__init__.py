"""Voxel world data: block registry, paletted chunks and terrain generation."""
from .coords import (
    CHUNK_HEIGHT,
    CHUNK_SIZE,
    CHUNK_VOLUME,
    Vec3i,
    chunk_local_to_world,
    index_to_local,
    local_to_index,
    world_to_chunk,
    world_to_local,
)
from .errors import PaletteOverflowError, WorldError
from .blocks import AIR_BLOCK, BlockDef, BlockKind, BlockRegistry
from .palette import PALETTE_CAPACITY, Palette
from .chunks import Chunk
from .chunk_manager import ChunkManager
from .terrain import Biome, TerrainConfig, TerrainGenerator

__all__ = [
    "CHUNK_SIZE",
    "CHUNK_HEIGHT",
    "CHUNK_VOLUME",
    "Vec3i",
    "world_to_chunk",
    "world_to_local",
    "chunk_local_to_world",
    "local_to_index",
    "index_to_local",
    "WorldError",
    "PaletteOverflowError",
    "AIR_BLOCK",
    "BlockDef",
    "BlockKind",
    "BlockRegistry",
    "PALETTE_CAPACITY",
    "Palette",
    "Chunk",
    "ChunkManager",
    "Biome",
    "TerrainConfig",
    "TerrainGenerator",
]
