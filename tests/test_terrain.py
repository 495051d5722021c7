from world.blocks import BlockDef, BlockKind, BlockRegistry
from world.chunk_manager import ChunkManager
from world.chunks import Chunk
from world.coords import CHUNK_HEIGHT, CHUNK_SIZE
from world.terrain import Biome, TerrainConfig, TerrainGenerator

import pytest


@pytest.fixture(scope="module")
def generator():
    return TerrainGenerator(TerrainConfig(seed=12345, sea_level=64, max_height=128))


def _ids(registry):
    return {name: registry.get_by_name(name).id for name in ("air", "stone", "dirt", "grass")}


def test_default_config():
    config = TerrainConfig()
    assert config.seed == 12345
    assert config.sea_level == 64
    assert config.max_height == 128
    assert config.height_scale > 0.0
    assert config.height_frequency > 0.0


def test_config_validation():
    with pytest.raises(ValueError):
        TerrainConfig(max_height=CHUNK_HEIGHT)
    with pytest.raises(ValueError):
        TerrainConfig(cave_frequency=-0.1)
    with pytest.raises(ValueError):
        TerrainConfig(cave_threshold=-1.0)


def test_heights_are_deterministic_and_bounded(generator):
    for x in range(-300, 301, 37):
        for z in range(-300, 301, 41):
            height = generator.get_height(x, z)
            assert 0 <= height <= generator.config.max_height
            assert height == generator.get_height(x, z)


def test_height_is_clamped():
    tall = TerrainGenerator(TerrainConfig(sea_level=200, max_height=100))
    low = TerrainGenerator(TerrainConfig(sea_level=-50, max_height=100, height_scale=8.0))
    for x in range(0, 64, 9):
        assert tall.get_height(x, x) == 100
        assert low.get_height(x, -x) == 0


def test_reference_scenario(generator):
    ids = _ids(generator.registry)
    height = generator.get_height(0, 0)
    assert generator.get_block_at((0, 0, 0)) == ids["stone"]
    assert generator.get_block_at((0, height + 10, 0)) == ids["air"]
    assert generator.get_block_at((0, height, 0)) == ids["grass"]


def test_default_config_surface_is_grass_with_caves_enabled():
    gen = TerrainGenerator(TerrainConfig())
    ids = _ids(gen.registry)
    assert gen.config.cave_threshold > 0.0
    # Gradient noise is 0 on lattice points, so the origin sits at sea level.
    height = gen.get_height(0, 0)
    assert height == gen.config.sea_level
    assert not gen.is_cave(0, height, 0)
    assert gen.get_block_at((0, height, 0)) == ids["grass"]
    assert gen.get_block_at((0, height - 1, 0)) == ids["dirt"]
    assert gen.generate_chunk((0, 0, 0)).get_block((0, height, 0)) == ids["grass"]


def test_layering_without_caves():
    gen = TerrainGenerator(TerrainConfig(cave_threshold=0.0))
    ids = _ids(gen.registry)
    for x, z in [(0, 0), (17, -4), (-33, 90)]:
        height = gen.get_height(x, z)
        assert gen.get_block_at((x, height, z)) == ids["grass"]
        assert gen.get_block_at((x, height + 1, z)) == ids["air"]
        for depth in (1, 2, 3):
            if height - depth > 0:
                assert gen.get_block_at((x, height - depth, z)) == ids["dirt"]
        if height - 4 > 0:
            assert gen.get_block_at((x, height - 4, z)) == ids["stone"]
        assert gen.get_block_at((x, 0, z)) == ids["stone"]


def test_caves_respect_margins(generator):
    top = generator.config.max_height
    for x in range(0, 40, 3):
        for z in range(0, 40, 5):
            for y in (0, 1, 5, top - 5, top):
                assert not generator.is_cave(x, y, z)


def test_full_threshold_carves_everything_between_margins():
    gen = TerrainGenerator(TerrainConfig(cave_threshold=2.0))
    assert gen.is_cave(3, 6, 3)
    assert not gen.is_cave(3, 5, 3)
    assert gen.get_block_at((3, 6, 3)) == gen.air_id
    assert gen.get_block_at((3, 0, 3)) == gen.stone_id


def test_generate_chunk(generator):
    ids = _ids(generator.registry)
    chunk = generator.generate_chunk((0, 0, 0))
    assert chunk.position == (0, 0, 0)
    assert not chunk.is_dirty()
    assert not chunk.is_empty()
    assert chunk.count_solid_blocks() > 0
    assert any(block_id == ids["grass"] for _, block_id in chunk.iterate_blocks())
    for y in range(200, CHUNK_HEIGHT):
        assert chunk.get_block((8, y, 8)) == ids["air"]


def test_generate_chunk_matches_per_voxel_rule(generator):
    chunk = generator.generate_chunk((-1, 0, 2))
    origin = chunk.world_origin()
    heights = generator.column_heights((-1, 0, 2))
    for lx in (0, 7, 15):
        for lz in (0, 9, 15):
            assert heights[lx][lz] == generator.get_height(origin.x + lx, origin.z + lz)
            for y in range(0, 140, 3):
                world = (origin.x + lx, y, origin.z + lz)
                assert chunk.get_block((lx, y, lz)) == generator.get_block_at(world)


def test_identical_configs_produce_identical_chunks():
    config = TerrainConfig(seed=777)
    first = TerrainGenerator(config).generate_chunk((3, 0, -2))
    second = TerrainGenerator(TerrainConfig(seed=777)).generate_chunk((3, 0, -2))
    assert first.voxel_bytes() == second.voxel_bytes()
    assert first.palette.ids() == second.palette.ids()
    assert first == second


def test_height_and_cave_fields_are_decorrelated(generator):
    assert generator.height_noise.seed == 12345
    assert generator.cave_noise.seed == 12346


def test_wrapped_seed_keeps_height_and_cave_fields_apart():
    gen = TerrainGenerator(TerrainConfig(seed=-1))
    assert gen.height_noise.seed == 2**32 - 1
    assert gen.cave_noise.seed == 0
    points = [(x * 0.37, z * 0.53, 0.29) for x in range(1, 8) for z in range(1, 8)]
    height_values = [gen.height_noise.sample3(*p) for p in points]
    cave_values = [gen.cave_noise.sample3(*p) for p in points]
    assert height_values != cave_values

    zero = TerrainGenerator(TerrainConfig(seed=0))
    assert [zero.get_height(x, x * 3) for x in range(0, 400, 23)] != [
        gen.get_height(x, x * 3) for x in range(0, 400, 23)
    ]


def test_generate_chunks_around_skips_existing():
    gen = TerrainGenerator(TerrainConfig(seed=5))
    manager = ChunkManager()
    edited = Chunk((0, 0, 0))
    edited.set_block((0, 200, 0), 4)
    manager.insert(edited)

    generated = gen.generate_chunks_around((0, 0, 0), 1, manager)
    assert len(generated) == 8
    assert (0, 0, 0) not in generated
    assert manager.chunk_count() == 9
    assert manager.get((0, 0, 0)) is edited
    assert edited.get_block((0, 200, 0)) == 4
    for x in (-1, 0, 1):
        for z in (-1, 0, 1):
            assert (x, 0, z) in manager

    assert gen.generate_chunks_around((0, 0, 0), 1, manager) == []


def test_generate_chunks_around_in_worker_processes():
    config = TerrainConfig(seed=99)
    gen = TerrainGenerator(config)
    manager = ChunkManager()
    generated = gen.generate_chunks_around((2, 0, 2), 1, manager, workers=2)
    assert len(generated) == 9
    expected = TerrainGenerator(config).generate_chunk((3, 0, 1))
    assert manager.get((3, 0, 1)) == expected
    assert not manager.get((3, 0, 1)).is_dirty()


def test_custom_registry_is_used():
    registry = BlockRegistry()
    registry.register(BlockDef(3, "turf", BlockKind.SOLID, 3))
    registry.register(BlockDef(30, "grass", BlockKind.SOLID, 30))
    gen = TerrainGenerator(TerrainConfig(cave_threshold=0.0), registry)
    height = gen.get_height(4, 4)
    assert gen.get_block_at((4, height, 4)) == 30


def test_missing_required_block():
    registry = BlockRegistry()
    registry.register(BlockDef(2, "loam", BlockKind.SOLID, 2))
    with pytest.raises(ValueError):
        TerrainGenerator(registry=registry)


def test_biomes():
    registry = BlockRegistry()
    grass = registry.get_by_name("grass").id
    stone = registry.get_by_name("stone").id
    assert Biome.PLAINS.surface_block(registry) == grass
    assert Biome.HILLS.surface_block(registry) == grass
    assert Biome.MOUNTAINS.surface_block(registry) == stone
    assert Biome.DESERT.surface_block(registry) == registry.get_by_name("dirt").id
    assert Biome.MOUNTAINS.height_scale > Biome.PLAINS.height_scale
    assert TerrainConfig().for_biome(Biome.DESERT).height_scale == 8.0


def test_chunk_footprint_matches_column_count(generator):
    heights = generator.column_heights((0, 0, 0))
    assert len(heights) == CHUNK_SIZE
    assert all(len(row) == CHUNK_SIZE for row in heights)
