"""File-based key-value storage adapter."""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonFileStore:
    """
    Key-value storage in a single JSON file.

    Implements KeyValueStore protocol. The file holds one JSON object
    mapping keys to string values; it is re-read on every access so that
    separate processes see each other's writes (last write wins).
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            logger.warning(f"Store file {self.path} is corrupt, starting empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Store file {self.path} does not hold an object, starting empty")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self, data: dict[str, str]) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, sort_keys=True))
        tmp.replace(self.path)

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)
