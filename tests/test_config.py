import json

from engine import config as engine_config
from world.terrain import TerrainConfig

import pytest


@pytest.fixture
def restore_config():
    yield
    engine_config.load()


def test_dotted_lookup(tmp_path, restore_config):
    path = tmp_path / "world.json"
    path.write_text(json.dumps({"terrain": {"seed": 42, "sea_level": 70}, "generation": {"workers": 3}}))
    engine_config.load(path)
    assert engine_config.get("terrain.seed") == 42
    assert engine_config.get("generation.workers") == 3
    assert engine_config.get("terrain.missing", "fallback") == "fallback"
    assert engine_config.get("terrain.seed.deeper", None) is None


def test_terrain_config_from_file(tmp_path, restore_config):
    path = tmp_path / "world.json"
    path.write_text(json.dumps({"terrain": {"seed": 42, "sea_level": 70, "cave_threshold": 0.1}}))
    engine_config.load(path)
    config = TerrainConfig.from_config()
    assert config.seed == 42
    assert config.sea_level == 70
    assert config.cave_threshold == 0.1
    assert config.max_height == TerrainConfig().max_height


def test_missing_and_invalid_files_fall_back(tmp_path, restore_config):
    assert engine_config.load(tmp_path / "absent.json") == {}
    assert TerrainConfig.from_config() == TerrainConfig()

    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    assert engine_config.load(broken) == {}

    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]")
    assert engine_config.load(listing) == {}


def test_shipped_config_matches_defaults(restore_config):
    engine_config.load()
    assert TerrainConfig.from_config() == TerrainConfig()
