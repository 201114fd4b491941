"""
String key-value backends for control plane persistence

Values are opaque strings, the same contract as a browser's local storage.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Minimal key-value interface the entity store persists through"""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store; contents vanish with the process"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self):
        return list(self._items.keys())


class FileKeyValueStore(KeyValueStore):
    """One file per key under a directory"""

    def __init__(self, storage_path: str = "data/console"):
        self.storage_path = Path(storage_path)
        self.storage_path.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        return self.storage_path / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        # Write-then-rename so readers never see a half-written collection
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, 'w', encoding='utf-8') as f:
            f.write(value)
        tmp_path.replace(path)
        logger.debug(f"Persisted {key} to {path}")

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        if path.exists():
            path.unlink()
