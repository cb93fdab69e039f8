"""Key-value storage backends for the history store."""

import re
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from mdexport.services.file_operations import atomic_write

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


@runtime_checkable
class StorageBackend(Protocol):
    """Durable key-value storage: whole values are read and overwritten."""

    def get(self, key: str) -> Optional[bytes]:
        """Return the stored value, or None if the key was never written."""
        ...

    def set(self, key: str, value: bytes) -> None:
        """Overwrite the value for a key."""
        ...


class MemoryStorage:
    """In-process storage, mainly for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None) -> None:
        self._values: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._values.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._values[key] = bytes(value)


class FileStorage:
    """
    One file per key inside a directory.

    Writes go through atomic_write, so a crash mid-write leaves the
    previous value intact.

    Example:
        >>> storage = FileStorage(Path("~/.local/share/mdexport").expanduser())
        >>> storage.set("last_session", b"# Draft")
        >>> storage.get("last_session")
        b'# Draft'
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, value: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        atomic_write(self.path_for(key), value)
