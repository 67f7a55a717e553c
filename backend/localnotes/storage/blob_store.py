import os
from pathlib import Path
from typing import Protocol

DEFAULT_STORAGE_KEY = "notes"


def _safe_key(key: str) -> str:
    # key becomes a file name; keep it strict to avoid path issues
    if not key or any(ch in key for ch in ["/", "\\"]) or ".." in key:
        raise ValueError("Invalid storage key")
    return key


def _atomic_write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
    tmp_path.replace(path)


class BlobStore(Protocol):
    def load(self) -> str | None: ...

    def save(self, blob: str) -> None: ...


class MemoryBlobStore:
    """Keeps the blob in process memory. Used by tests and NOTES_STORAGE=memory."""

    def __init__(self, initial: str | None = None, key: str = DEFAULT_STORAGE_KEY):
        self.key = _safe_key(key)
        self.blob = initial
        self.writes = 0

    def load(self) -> str | None:
        return self.blob

    def save(self, blob: str) -> None:
        self.blob = blob
        self.writes += 1


class FileBlobStore:
    """One blob per key, stored as <base_dir>/<key>.json and replaced atomically."""

    def __init__(self, base_dir: Path, key: str = DEFAULT_STORAGE_KEY):
        self.base_dir = base_dir
        self.key = _safe_key(key)

    @property
    def path(self) -> Path:
        return self.base_dir / f"{self.key}.json"

    def load(self) -> str | None:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def save(self, blob: str) -> None:
        _atomic_write_text(self.path, blob)
