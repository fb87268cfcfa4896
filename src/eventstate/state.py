"""
Shared mutable interaction state owned by one coordinator.

Layout::

    {
        "<child name>": {"<event key>": {"<target>": {...patch...}}},
        "parent": {...patch...},
    }

Event keys are always stored as strings so that a mutation declared with
``event_key=0`` and a base-props key ``"0"`` address the same record.

Lifecycle: created empty with the coordinator, grown by the mutation engine
and by resolved event handlers, cleared on unmount.

Thread safety: Not thread-safe (all operations expected on the render thread).
"""

import json
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)


def state_key(event_key: Any) -> str:
    """Normalize an event key for use as a state dictionary key."""
    return event_key if isinstance(event_key, str) else str(event_key)


def lookup(mapping: Any, key: Any) -> Any:
    """Get key from mapping, tolerating int/str spelling differences.

    Base props produced by components may key datums by int while state and
    selectors use strings.
    """
    if not isinstance(mapping, Mapping):
        return None
    if key in mapping:
        return mapping[key]
    text = state_key(key)
    if text in mapping:
        return mapping[text]
    if isinstance(key, str) and key.lstrip('-').isdigit():
        return mapping.get(int(key))
    return None


class SharedState:
    """Keyed store shared by a container and its named children.

    Mirrors a component's setState(): patches are merged shallowly at the top
    level, then the optional callback runs, then change listeners are notified.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._state: Dict[str, Any] = dict(initial or {})
        self._change_callbacks: List[Callable[[Dict[str, Any]], None]] = []

    @property
    def state(self) -> Dict[str, Any]:
        """Current state mapping. Treat as read-only; write via set_state()."""
        return self._state

    def slice(self, name: Any) -> Any:
        """State record for one child (None if the child has no state)."""
        return self._state.get(name)

    def set_state(self, patch: Optional[Mapping[str, Any]], callback: Optional[Callable[[], None]] = None) -> None:
        """Merge patch into state, then run callback.

        Args:
            patch: Top-level entries to replace
            callback: Called once after the merge; exceptions propagate
        """
        if patch:
            self._state = {**self._state, **patch}
            logger.debug(f"Merged state patch for keys: {list(patch.keys())}")
        if callback is not None:
            callback()
        if patch:
            self._notify_change()

    def clear(self) -> None:
        """Drop all state. Used when the owning coordinator is torn down."""
        self._state = {}

    def on_change(self, callback: Callable[[Dict[str, Any]], None]) -> None:
        """Subscribe to state changes. Callback receives the new state."""
        if callback not in self._change_callbacks:
            self._change_callbacks.append(callback)

    def off_change(self, callback: Callable[[Dict[str, Any]], None]) -> None:
        """Unsubscribe from state changes."""
        if callback in self._change_callbacks:
            self._change_callbacks.remove(callback)

    def _notify_change(self) -> None:
        for callback in self._change_callbacks:
            try:
                callback(self._state)
            except Exception as e:
                logger.warning(f"State change listener failed: {e}")


def _decycle(value: Any, path: List[str], seen: Dict[int, str]) -> Any:
    """Convert value into JSON-safe data, replacing circular references."""
    if isinstance(value, (Mapping, list, tuple)):
        ident = id(value)
        if ident in seen:
            return f"[Circular {seen[ident]}]"
        seen[ident] = '.'.join(['~'] + path)
        try:
            if isinstance(value, Mapping):
                return {
                    state_key(k): _decycle(v, path + [state_key(k)], seen)
                    for k, v in value.items()
                }
            return [_decycle(v, path + [str(i)], seen) for i, v in enumerate(value)]
        finally:
            del seen[ident]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return repr(value)


def safe_stringify(value: Any) -> str:
    """Deterministic JSON text for a state record.

    Keys are sorted, circular references become ``"[Circular ~.path]"`` markers
    and values JSON cannot represent are rendered with repr(), so the result is
    always comparable with ==.
    """
    if value is None:
        return 'null'
    return json.dumps(_decycle(value, [], {}), sort_keys=True)
