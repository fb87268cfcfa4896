"""
Fingerprint-validated cache of per-child shared event bundles.

Building a bundle is cheap, but handing a child a new bundle object on every
render defeats identity-based change detection downstream. The cache keeps
one entry per child name and serves it only while the fingerprint (child
name, base props, the child's filtered events and its serialized state)
deep-equals the one stored with it. Any difference rebuilds and overwrites
the entry, so a stale bundle is never served.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

from eventstate.state import safe_stringify

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class Fingerprint:
    """Composite key capturing everything that can invalidate a bundle.

    Compared with ==; components may be unhashable (dicts, lists).
    """
    name: Any
    base_props: Any
    events: Tuple[Any, ...]
    serialized_state: str

    @classmethod
    def create(cls, name: Any, base_props: Any, events: Any, state_slice: Any) -> 'Fingerprint':
        """Build a fingerprint, serializing the state slice."""
        return cls(
            name=name,
            base_props=base_props,
            events=tuple(events or ()),
            serialized_state=safe_stringify(state_slice),
        )


class SharedEventsCache(Generic[T]):
    """
    One (value, fingerprint) entry per child name.

    Example:
        cache = SharedEventsCache()
        bundle = cache.get_or_create(
            name,
            Fingerprint.create(name, base_props, child_events, state.get(name)),
            lambda: SharedEventBundle(...),
        )
    """

    def __init__(self, enabled: bool = True):
        """
        Initialize cache.

        Args:
            enabled: When False, every lookup misses (entries are still stored)
        """
        self.enabled = enabled
        self._entries: Dict[Any, Tuple[T, Fingerprint]] = {}
        self._hits = 0
        self._misses = 0

    def get(self, name: Any, fingerprint: Fingerprint) -> Optional[T]:
        """
        Get cached value if its fingerprint matches.

        Args:
            name: Child name
            fingerprint: Fingerprint of the current inputs

        Returns:
            Cached value, or None on miss or fingerprint mismatch
        """
        entry = self._entries.get(name)
        if self.enabled and entry is not None and entry[1] == fingerprint:
            self._hits += 1
            return entry[0]
        self._misses += 1
        return None

    def put(self, name: Any, value: T, fingerprint: Fingerprint) -> None:
        """Store value for name, replacing any previous entry."""
        self._entries[name] = (value, fingerprint)

    def get_or_create(self, name: Any, fingerprint: Fingerprint, factory: Callable[[], T]) -> T:
        """
        Get cached value or build, store and return a new one.

        Args:
            name: Child name
            fingerprint: Fingerprint of the current inputs
            factory: Builds the value on a miss

        Returns:
            Cached or newly built value
        """
        cached = self.get(name, fingerprint)
        if cached is not None:
            return cached
        logger.debug(f"Shared events cache miss for {name!r}, rebuilding bundle")
        value = factory()
        self.put(name, value, fingerprint)
        return value

    def invalidate(self) -> None:
        """Drop all entries."""
        self._entries.clear()

    def stats(self) -> Dict[str, int]:
        """Hit/miss counters and current entry count."""
        return {'hits': self._hits, 'misses': self._misses, 'entries': len(self._entries)}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: Any) -> bool:
        return name in self._entries
