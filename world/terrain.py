"""Deterministic terrain synthesis from layered noise."""
from __future__ import annotations

import multiprocessing
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from engine import config as engine_config
from world.blocks import BlockRegistry
from world.chunk_manager import ChunkManager
from world.chunks import Chunk
from world.coords import CHUNK_HEIGHT, CHUNK_SIZE, Vec3i, as_vec, chunk_origin, local_to_index
from world.noise import NoiseField, wrap_seed

# Caves stay this many blocks clear of bedrock and of max_height.
CAVE_MARGIN = 5
# Vertical sample stretch; values below 1 elongate caves horizontally.
CAVE_VERTICAL_STRETCH = 0.5
DIRT_DEPTH = 3


@dataclass(frozen=True)
class TerrainConfig:
    seed: int = 12345
    sea_level: int = 64
    max_height: int = 128
    height_scale: float = 32.0
    height_frequency: float = 0.01
    cave_frequency: float = 0.05
    cave_threshold: float = 0.3

    def __post_init__(self) -> None:
        if not 0 <= self.max_height < CHUNK_HEIGHT:
            raise ValueError(f"max_height must be within [0, {CHUNK_HEIGHT - 1}]")
        if self.height_frequency < 0 or self.cave_frequency < 0:
            raise ValueError("noise frequencies must be non-negative")
        if self.cave_threshold < 0:
            raise ValueError("cave_threshold must be non-negative")

    @classmethod
    def from_config(cls) -> "TerrainConfig":
        """Build a config from the ``terrain`` section of the engine config."""
        defaults = cls()
        return cls(
            seed=int(engine_config.get("terrain.seed", defaults.seed)),
            sea_level=int(engine_config.get("terrain.sea_level", defaults.sea_level)),
            max_height=int(engine_config.get("terrain.max_height", defaults.max_height)),
            height_scale=float(engine_config.get("terrain.height_scale", defaults.height_scale)),
            height_frequency=float(engine_config.get("terrain.height_frequency", defaults.height_frequency)),
            cave_frequency=float(engine_config.get("terrain.cave_frequency", defaults.cave_frequency)),
            cave_threshold=float(engine_config.get("terrain.cave_threshold", defaults.cave_threshold)),
        )

    def for_biome(self, biome: "Biome") -> "TerrainConfig":
        return replace(self, height_scale=biome.height_scale)


class Biome(Enum):
    PLAINS = "plains"
    HILLS = "hills"
    MOUNTAINS = "mountains"
    DESERT = "desert"

    @property
    def height_scale(self) -> float:
        return _BIOME_HEIGHT_SCALE[self]

    def surface_block(self, registry: BlockRegistry) -> int:
        return _require_block(registry, _BIOME_SURFACE[self])


_BIOME_HEIGHT_SCALE = {
    Biome.PLAINS: 16.0,
    Biome.HILLS: 32.0,
    Biome.MOUNTAINS: 64.0,
    Biome.DESERT: 8.0,
}
# Desert has no sand block yet; dirt stands in.
_BIOME_SURFACE = {
    Biome.PLAINS: "grass",
    Biome.HILLS: "grass",
    Biome.MOUNTAINS: "stone",
    Biome.DESERT: "dirt",
}


def _require_block(registry: BlockRegistry, name: str) -> int:
    block = registry.get_by_name(name)
    if block is None:
        raise ValueError(f"terrain generation needs a '{name}' block in the registry")
    return block.id


class TerrainGenerator:
    """Maps world coordinates to block ids using a height field and a cave field.

    The generator is immutable after construction: it can be shared by
    threads, and worker processes rebuild an identical copy from the config
    and registry alone.
    """

    def __init__(
        self,
        config: Optional[TerrainConfig] = None,
        registry: Optional[BlockRegistry] = None,
    ) -> None:
        self.config = config if config is not None else TerrainConfig()
        self.registry = registry if registry is not None else BlockRegistry()
        self.height_noise = NoiseField(self.config.seed)
        self.cave_noise = NoiseField(wrap_seed(self.config.seed + 1))

        self.air_id = _require_block(self.registry, "air")
        self.stone_id = _require_block(self.registry, "stone")
        self.dirt_id = _require_block(self.registry, "dirt")
        self.grass_id = _require_block(self.registry, "grass")

    # Per-coordinate -----------------------------------------------------
    def get_height(self, x: int, z: int) -> int:
        freq = self.config.height_frequency
        return self._height_from(self.height_noise.sample2(x * freq, z * freq))

    def _height_from(self, value: float) -> int:
        cfg = self.config
        height = cfg.sea_level + int(round(value * cfg.height_scale))
        return max(0, min(cfg.max_height, height))

    def is_cave(self, x: int, y: int, z: int) -> bool:
        cfg = self.config
        if not CAVE_MARGIN < y < cfg.max_height - CAVE_MARGIN:
            return False
        return abs(self._cave_sample(x, y, z)) < cfg.cave_threshold

    def _cave_sample(self, x, y, z):
        freq = self.config.cave_frequency
        return self.cave_noise.sample3(x * freq, y * freq * CAVE_VERTICAL_STRETCH, z * freq)

    def _cave_column(self, x: int, z: int, top: int) -> np.ndarray:
        """Cave mask for ``y`` in ``0..top`` of one column, same rule as ``is_cave``."""
        cfg = self.config
        ys = np.arange(top + 1)
        inside = (ys > CAVE_MARGIN) & (ys < cfg.max_height - CAVE_MARGIN)
        return inside & (np.abs(self._cave_sample(x, ys, z)) < cfg.cave_threshold)

    def get_block_at(self, world: Sequence[int]) -> int:
        x, y, z = world
        height = self.get_height(x, z)
        return self._block_for(y, height, y <= height and self.is_cave(x, y, z))

    def _block_for(self, y: int, height: int, cave: bool) -> int:
        if y > height or cave:
            return self.air_id
        if y <= 0:
            return self.stone_id
        if y == height:
            return self.grass_id
        if y >= height - DIRT_DEPTH:
            return self.dirt_id
        return self.stone_id

    # Per-chunk ----------------------------------------------------------
    def column_heights(self, chunk_pos: Sequence[int]) -> List[List[int]]:
        """Surface height for every column of a chunk, indexed ``[x][z]``."""
        origin = chunk_origin(chunk_pos)
        freq = self.config.height_frequency
        xs = np.arange(origin.x, origin.x + CHUNK_SIZE).reshape(-1, 1)
        zs = np.arange(origin.z, origin.z + CHUNK_SIZE).reshape(1, -1)
        values = self.height_noise.sample2(xs * freq, zs * freq)
        return [[self._height_from(float(value)) for value in row] for row in values]

    def generate_chunk(self, chunk_pos: Sequence[int]) -> Chunk:
        chunk = Chunk(chunk_pos)
        origin = chunk.world_origin()
        heights = self.column_heights(chunk.position)
        palette = chunk.palette
        voxels = chunk.voxels

        for lx in range(CHUNK_SIZE):
            wx = origin.x + lx
            for lz in range(CHUNK_SIZE):
                wz = origin.z + lz
                height = heights[lx][lz]
                # Everything above the surface is already air.
                top = min(height, CHUNK_HEIGHT - 1)
                caves = self._cave_column(wx, wz, top)
                for y in range(top + 1):
                    block_id = self._block_for(y, height, caves[y])
                    if block_id != self.air_id:
                        voxels[local_to_index((lx, y, lz))] = palette.add_block(block_id)

        chunk.mark_clean()
        return chunk

    def generate_chunks_around(
        self,
        center: Sequence[int],
        radius: int,
        manager: ChunkManager,
        workers: int = 1,
    ) -> List[Vec3i]:
        """Generate every missing chunk in the square of ``radius`` around ``center``.

        Chunks already held by ``manager`` are never replaced, so player edits
        survive. Returns the coordinates that were generated.
        """
        cx, _, cz = as_vec(center)
        radius = max(0, int(radius))
        missing = [
            Vec3i(x, 0, z)
            for x in range(cx - radius, cx + radius + 1)
            for z in range(cz - radius, cz + radius + 1)
            if manager.get((x, 0, z)) is None
        ]
        if not missing:
            return []

        start = time.perf_counter()
        if workers > 1 and len(missing) > 1:
            chunks = self._generate_parallel(missing, workers)
        else:
            chunks = [self.generate_chunk(pos) for pos in missing]

        generated = [chunk.position for chunk in chunks if manager.insert_if_absent(chunk)]
        elapsed = time.perf_counter() - start
        print(f"[worldgen] generated {len(generated)} chunks around {(cx, cz)} in {elapsed:.3f} s")
        return generated

    def _generate_parallel(self, positions: List[Vec3i], workers: int) -> List[Chunk]:
        processes = min(int(workers), len(positions))
        init_args = (self.config, self.registry)
        with multiprocessing.Pool(processes=processes, initializer=_init_worker, initargs=init_args) as pool:
            return pool.map(_generate_in_worker, positions)


# --- Worker process state ---
_worker_generator: Optional[TerrainGenerator] = None


def _init_worker(config: TerrainConfig, registry: BlockRegistry) -> None:
    global _worker_generator
    _worker_generator = TerrainGenerator(config, registry)


def _generate_in_worker(chunk_pos: Vec3i) -> Chunk:
    if _worker_generator is None:
        raise RuntimeError("worker generator was not initialized")
    return _worker_generator.generate_chunk(chunk_pos)
