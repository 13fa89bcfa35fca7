"""
Key-value stores used to persist scores, player names and saved games.
"""

import json
from pathlib import Path
from typing import Optional, Protocol, Union


class KeyValueStore(Protocol):
    """String-keyed store of string values."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """In-process store, lost when the process ends."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)


class JsonFileStore:
    """
    Store backed by a single JSON object on disk.

    Every ``set`` rewrites the whole file. Errors reading or writing the file propagate as
    `OSError` or `ValueError`.

    Parameters
    ----------
    path : str or Path
        Location of the JSON file. It is created on first write.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as file_h:
            data = json.load(file_h)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = str(value)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as file_h:
            json.dump(data, file_h, ensure_ascii=False)
