"""
Registry of history-tree sizes and statistics.

- One entry per built tree, written by the build CLI.
- Deduplicated: an entry identical to an existing one is NOT written again.
- Stored as JSON (a list of entries) so it is easy to evaluate later.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

DEFAULT_REGISTRY_PATH = os.path.join("data", "trees", "history_tree_registry.json")


def get_registry_path(path: Optional[str] = None) -> str:
    path = path or DEFAULT_REGISTRY_PATH
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    return path


def _load_registry(path: str) -> List[Dict[str, Any]]:
    if not os.path.exists(path):
        return []
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Tree registry {path} does not hold a list of entries")
    return data


def _atomic_write_json(path: str, obj: Any) -> None:
    tmp_path = path + ".tmp"
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2, sort_keys=True)
        f.write("\n")
    os.replace(tmp_path, path)


def record_tree_stats(entry: Dict[str, Any], path: Optional[str] = None) -> bool:
    """
    Store `entry` in the registry unless an identical entry already exists.

    Returns:
      True  => newly added
      False => already present
    """
    path = get_registry_path(path)
    entries = _load_registry(path)

    if entry in entries:
        return False

    entries.append(entry)
    _atomic_write_json(path, entries)
    return True
