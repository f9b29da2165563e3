"""Local key-value blob stores."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from nutriplan.services.food_log import BlobStore


@dataclass
class InMemoryBlobStore(BlobStore):
    """Blob store kept in process memory."""

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value for a key."""
        self.values[key] = value


@dataclass
class FileBlobStore(BlobStore):
    """Blob store writing one JSON file per key under a directory."""

    directory: Path

    def get(self, key: str) -> str | None:
        """Return the file contents for a key, or None if it was never written."""
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        """Atomically replace the file for a key."""
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, path)

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return Path(self.directory) / f"{key}.json"
