"""
Shared event bundle handed to each participating child.

The bundle is a small value object: a child name, the base props map, the
event descriptors that apply to the child, and a handle on the coordinator's
store. Children resolve their handlers lazily at their own render time via
get_events(); nothing is evaluated when the bundle is built.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from eventstate.descriptors import EventDescriptor
from eventstate.events import BoundHandler, get_event_state, get_scoped_events
from eventstate.state import SharedState


@dataclass(frozen=True, eq=False)
class SharedEventBundle:
    """Name-bound resolver interface for one child (name None for the parent)."""
    name: Optional[str]
    base_props: Mapping[str, Any]
    events: List[EventDescriptor] = field(default_factory=list)
    store: SharedState = field(default_factory=SharedState, repr=False)

    def get_events(self, handlers: Mapping[str, Callable[..., Any]], target: Any) -> Dict[str, BoundHandler]:
        """Bind handlers to this bundle's child name and target."""
        return get_scoped_events(handlers, target, self.name, self.base_props, self.store)

    def get_event_state(self, event_key: Any, target: Any) -> Dict[str, Any]:
        """Current state patch for this child at (event_key, target)."""
        return get_event_state(self.store.state, event_key, target, self.name)
