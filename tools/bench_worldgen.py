"""Benchmark terrain generation and chunk storage."""
from __future__ import annotations

import argparse
import sys
import time
from collections import Counter
from dataclasses import replace
from typing import List, Optional

from engine import config as engine_config
from world.blocks import BlockRegistry, load_block_defs
from world.chunk_manager import ChunkManager
from world.terrain import TerrainConfig, TerrainGenerator


def _parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Benchmark chunk generation")
    parser.add_argument("--config", default=None, help="World config json (defaults to config/world.json)")
    parser.add_argument("--radius", type=int, default=None, help="Chunk radius around the origin")
    parser.add_argument("--seed", type=int, default=None, help="Override the configured seed")
    parser.add_argument("--workers", type=int, default=None, help="Worker processes (1 = in-process)")
    parser.add_argument("--center", nargs=2, type=int, metavar=("CX", "CZ"), default=[0, 0])
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)

    if args.config:
        engine_config.load(args.config)

    terrain = TerrainConfig.from_config()
    if args.seed is not None:
        terrain = replace(terrain, seed=args.seed)

    registry = BlockRegistry()
    extra_blocks = engine_config.get("blocks", [])
    if extra_blocks:
        added = load_block_defs(registry, extra_blocks)
        print(f"[bench] registered {len(added)} content blocks")

    radius = args.radius if args.radius is not None else int(engine_config.get("generation.load_radius", 2))
    workers = args.workers if args.workers is not None else int(engine_config.get("generation.workers", 1))

    generator = TerrainGenerator(terrain, registry)
    manager = ChunkManager()
    center = (args.center[0], 0, args.center[1])

    t_start = time.perf_counter()
    generated = generator.generate_chunks_around(center, radius, manager, workers=workers)
    gen_time = time.perf_counter() - t_start

    t_count = time.perf_counter()
    solid = 0
    palette_sizes: Counter = Counter()
    for chunk in manager:
        solid += chunk.count_solid_blocks()
        palette_sizes[chunk.palette.size()] += 1
    count_time = time.perf_counter() - t_count

    print("Seed:", terrain.seed)
    print("Radius:", radius)
    print("Workers:", workers)
    print(f"Generation time: {gen_time:.3f} s")
    if generated:
        print(f"Per chunk: {1000.0 * gen_time / len(generated):.1f} ms")
    print(f"Count time: {count_time:.3f} s")
    print("Chunks:", manager.chunk_count())
    print("Solid blocks:", solid)
    print("Palette sizes:", dict(sorted(palette_sizes.items())))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
