from __future__ import annotations

from pathlib import Path
from typing import Optional

from .errors import FilesystemError

FNV32_OFFSET_BASIS = 2166136261
FNV32_PRIME = 16777619


def fnv32(data: bytes) -> int:
    """32-bit FNV-1 hash (multiply, then xor)."""
    value = FNV32_OFFSET_BASIS
    for byte in data:
        value = (value * FNV32_PRIME) & 0xFFFFFFFF
        value ^= byte
    return value


def cache_key(data: bytes) -> str:
    return str(fnv32(data))


class CacheStore:
    """One file per entry, named by its key. Entries are never rewritten or removed."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def path_for(self, key: str) -> Path:
        return self.directory / key

    def __len__(self) -> int:
        if not self.directory.is_dir():
            return 0
        return sum(1 for path in self.directory.iterdir() if path.is_file())

    def get(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise FilesystemError(f"Cannot read cache entry {path}: {exc}") from exc

    def put(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise FilesystemError(f"Cannot write cache entry {path}: {exc}") from exc
