"""Key-value storage interface."""

from typing import Protocol


class KeyValueStore(Protocol):
    """Interface for string-valued persistent storage."""

    def get(self, key: str) -> str | None:
        """Read a value. Returns None if the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Write/overwrite a value."""
        ...

    def remove(self, key: str) -> None:
        """Delete a key. Absent keys are ignored."""
        ...
