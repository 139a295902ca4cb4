"""
In-memory key/value store for tests and demos.
"""

from typing import Dict, Set

from ..domain.exceptions import StorageError


class InMemoryStore:
    """
    Dictionary-backed store matching the file store's interface.

    Individual keys can be made to fail on read or write, which lets tests
    exercise the repository's fallback and rollback paths without touching
    the filesystem.
    """

    def __init__(self, initial: Dict[str, str] | None = None):
        """
        Initialize the store.

        Args:
            initial: Optional pre-populated key/value pairs
        """
        self.items: Dict[str, str] = dict(initial or {})
        self.failing_reads: Set[str] = set()
        self.failing_writes: Set[str] = set()
        self.write_count = 0

    async def get_item(self, key: str) -> str | None:
        if key in self.failing_reads:
            raise StorageError(f"Simulated read failure for '{key}'")
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        if key in self.failing_writes:
            raise StorageError(f"Simulated write failure for '{key}'")
        self.items[key] = value
        self.write_count += 1

    async def remove_item(self, key: str) -> None:
        if key in self.failing_writes:
            raise StorageError(f"Simulated write failure for '{key}'")
        self.items.pop(key, None)
