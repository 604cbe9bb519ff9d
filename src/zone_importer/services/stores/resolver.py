"""Store name resolution against a cached snapshot of the store directory."""

from __future__ import annotations

import functools
import logging
from typing import Iterable, Protocol, Sequence

from ...models.domain import StoreDirectoryEntry

logger = logging.getLogger(__name__)


class StoreDirectory(Protocol):
    def list_stores(self) -> Sequence[StoreDirectoryEntry]: ...


def _normalize(value: str) -> str:
    return value.strip().casefold()


class StoreResolver:
    """Resolve free-text store names to store identifiers.

    Matching is exact (case-insensitive, trimmed) first, then prefix; there
    is no fuzzy matching. Ties within a tier go to the first entry in cache
    order, which is the order the directory service listed the stores in.
    """

    def __init__(self, entries: Iterable[StoreDirectoryEntry] = ()) -> None:
        self._entries: tuple[StoreDirectoryEntry, ...] = tuple(entries)

    @property
    def entries(self) -> tuple[StoreDirectoryEntry, ...]:
        return self._entries

    def load(self, directory: StoreDirectory) -> int:
        """Populate the cache from the directory service.

        Best-effort: a failing directory leaves the cache empty so every
        resolution comes back unresolved instead of blocking the caller.
        """
        try:
            self._entries = tuple(directory.list_stores())
        except (ConnectionError, ValueError) as exc:
            logger.warning(f"Store directory unavailable, store names will not resolve: {exc}")
            self._entries = ()
        logger.info(f"Store resolver cache holds {len(self._entries)} store(s)")
        return len(self._entries)

    def _tiers(self, text: str) -> tuple[list[StoreDirectoryEntry], list[StoreDirectoryEntry]]:
        needle = _normalize(text)
        exact: list[StoreDirectoryEntry] = []
        prefix: list[StoreDirectoryEntry] = []
        if not needle:
            return exact, prefix
        for entry in self._entries:
            name = _normalize(entry.display_name)
            if name == needle:
                exact.append(entry)
            elif name.startswith(needle):
                prefix.append(entry)
        return exact, prefix

    def match(self, text: str) -> StoreDirectoryEntry | None:
        exact, prefix = self._tiers(text)
        if exact:
            return exact[0]
        if prefix:
            return prefix[0]
        return None

    def resolve(self, text: str) -> str | None:
        """Return the identifier for ``text`` or None when unresolved."""
        entry = self.match(text)
        return entry.identifier if entry else None

    def search(self, text: str, limit: int | None = None) -> list[StoreDirectoryEntry]:
        """All matches for the lookup box: exact matches first, then prefix matches."""
        exact, prefix = self._tiers(text)
        matches = exact + prefix
        return matches[:limit] if limit else matches


@functools.lru_cache(maxsize=1)
def get_store_resolver() -> StoreResolver:
    """Session snapshot of the store directory, loaded once."""
    from ..backend.client import ZoneServiceClient

    resolver = StoreResolver()
    try:
        client = ZoneServiceClient()
    except ValueError as exc:
        logger.warning(f"Store directory client could not be created, store names will not resolve: {exc}")
        return resolver
    with client:
        resolver.load(client)
    return resolver
