"""Chunk serialization helpers for saving and reloading edited chunks."""
from __future__ import annotations

import base64
import json
import os
import zlib
from typing import Any, Dict, Iterable, List

from world.chunk_manager import ChunkManager
from world.chunks import Chunk


def _to_position(values: Any) -> List[int]:
    if not isinstance(values, (list, tuple)) or len(values) != 3:
        raise ValueError("Field 'position' must be a sequence of length 3")
    try:
        return [int(v) for v in values]
    except Exception as exc:
        raise ValueError("Field 'position' must contain integers") from exc


def chunk_to_dict(chunk: Chunk) -> Dict[str, Any]:
    """Convert a chunk into a JSON-serializable dictionary."""
    return {
        "position": list(chunk.position),
        "palette": chunk.palette.ids(),
        "voxels": base64.b64encode(zlib.compress(chunk.voxel_bytes())).decode("ascii"),
    }


def chunk_from_dict(data: Dict[str, Any]) -> Chunk:
    """Create a chunk from a dictionary (inverse of chunk_to_dict)."""
    if not isinstance(data, dict):
        raise TypeError("Chunk data must be a JSON object/dict")

    position = _to_position(data.get("position"))
    palette_ids = data.get("palette")
    if not isinstance(palette_ids, list):
        raise ValueError("Field 'palette' must be a list")
    encoded = data.get("voxels")
    if not isinstance(encoded, str):
        raise ValueError("Field 'voxels' must be a base64 string")
    try:
        voxels = zlib.decompress(base64.b64decode(encoded))
    except (ValueError, zlib.error) as exc:
        raise ValueError("Field 'voxels' is not valid compressed voxel data") from exc
    return Chunk.from_parts(position, palette_ids, voxels)


def chunk_filename(chunk: Chunk) -> str:
    x, y, z = chunk.position
    return f"chunk_{x}_{y}_{z}.json"


def save_chunk(chunk: Chunk, directory: str) -> str:
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, chunk_filename(chunk))
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(chunk_to_dict(chunk), handle)
    return path


def load_chunk(path: str) -> Chunk:
    with open(path, "r", encoding="utf-8") as handle:
        return chunk_from_dict(json.load(handle))


def load_chunks(paths: Iterable[str], manager: ChunkManager) -> int:
    count = 0
    for path in paths:
        manager.insert(load_chunk(path))
        count += 1
    return count


def flush_dirty(manager: ChunkManager, directory: str) -> int:
    """Save every dirty chunk and mark it clean once written."""
    saved = 0
    for chunk in manager.dirty_chunks():
        save_chunk(chunk, directory)
        chunk.mark_clean()
        saved += 1
    if saved:
        print(f"[world] saved {saved} dirty chunks to {directory}")
    return saved
