"""
SharedEventsCoordinator: lifecycle owner for one coordinated tree.

The coordinator owns the SharedState and the SharedEventsCache for its tree
and is the only writer of both. The host rendering engine drives it through
three hooks:

- mount(): apply ``initial_event_mutations`` once, before the first render
- update(next_props): when props changed (deep equality), rebuild base props
  and apply ``external_event_mutations``; their callbacks run after the merge
- render(): rewrite children and build the root element

Thread safety: Not thread-safe (all operations expected on the render thread).
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from eventstate.base_props import get_base_props
from eventstate.bundle import SharedEventBundle
from eventstate.cache import Fingerprint, SharedEventsCache
from eventstate.config import EventStateConfig, get_current_config
from eventstate.container import build_container
from eventstate.descriptors import EventDescriptor, as_event_list
from eventstate.element import Element, clone_element, create_element
from eventstate.events import get_component_events
from eventstate.mutations import collect_callbacks, compute_mutations
from eventstate.state import SharedState

logger = logging.getLogger(__name__)

EVENT_COMPONENTS = ('container', 'group_component')


class SharedEventsCoordinator:
    """Coordinates events and mutation state between a container and its children.

    Recognized props: ``events``, ``event_key``, ``external_event_mutations``,
    ``initial_event_mutations``, ``container``, ``group_component``,
    ``children``.
    """
    role = 'shared-event-wrapper'

    def __init__(self, props: Mapping[str, Any], config: Optional[EventStateConfig] = None):
        self.config = config or get_current_config()
        self.props = self._with_defaults(props)
        self.store = SharedState()
        self.cache: SharedEventsCache[SharedEventBundle] = SharedEventsCache(enabled=self.config.cache_shared_events)
        self.base_props = self.get_base_props(self.props)
        self._mounted = False

    def _with_defaults(self, props: Mapping[str, Any]) -> Dict[str, Any]:
        result = dict(props)
        if result.get('group_component') is None:
            result['group_component'] = create_element(self.config.default_group_tag)
        return result

    @property
    def state(self) -> Dict[str, Any]:
        return self.store.state

    def set_state(self, patch: Optional[Mapping[str, Any]], callback: Optional[Callable[[], None]] = None) -> None:
        self.store.set_state(patch, callback)

    def get_base_props(self, props: Mapping[str, Any]) -> Dict[str, Any]:
        return get_base_props(props, self.config.inherited_prop_names)

    # ========== LIFECYCLE ==========

    def mount(self) -> None:
        """Apply initial mutations. Runs once; later calls are ignored."""
        if self._mounted:
            logger.debug("mount() called on an already mounted coordinator, ignoring")
            return
        self._mounted = True
        initial = compute_mutations(self.props, self.base_props, self.state, 'initial_event_mutations')
        if initial:
            logger.debug(f"Applying initial mutations for: {list(initial.keys())}")
            self.set_state(initial)

    def update(self, next_props: Mapping[str, Any]) -> bool:
        """Receive new props before a render.

        Returns:
            True, the tree always re-renders (the rewritten children depend on
            state that may have changed through handlers)
        """
        next_props = self._with_defaults(next_props)
        if next_props != self.props:
            base_props = self.get_base_props(next_props)
            external = compute_mutations(next_props, base_props, self.state)
            self._apply_external_mutations(next_props, external)
            self.base_props = base_props
        self.props = next_props
        return True

    def _apply_external_mutations(self, props: Mapping[str, Any], mutations: Optional[Dict[str, Any]]) -> None:
        if not mutations:
            return
        callbacks = collect_callbacks(props.get('external_event_mutations'))

        def run_callbacks() -> None:
            for callback in callbacks:
                callback()

        logger.debug(f"Applying external mutations for: {list(mutations.keys())}, {len(callbacks)} callback(s)")
        self.set_state(mutations, run_callbacks if callbacks else None)

    def unmount(self) -> None:
        """Tear down state and cached bundles."""
        self.store.clear()
        self.cache.invalidate()
        self._mounted = False
        logger.info("Shared events coordinator unmounted")

    # ========== RENDER ==========

    def get_all_events(self, props: Mapping[str, Any]) -> Optional[List[EventDescriptor]]:
        """Own events plus ``default_events`` of the container/group components."""
        component_events = get_component_events(props, EVENT_COMPONENTS)
        own_events = as_event_list(props.get('events'))
        if component_events is not None:
            return component_events + own_events
        return own_events or None

    def get_shared_events(self, name: str, child_events: List[EventDescriptor]) -> SharedEventBundle:
        """Cached bundle for a child, rebuilt whenever its fingerprint changes."""
        fingerprint = Fingerprint.create(name, self.base_props, child_events, self.state.get(name))
        return self.cache.get_or_create(
            name,
            fingerprint,
            lambda: SharedEventBundle(name=name, base_props=self.base_props, events=child_events, store=self.store),
        )

    def render(self) -> Element:
        """Build the root element for the current props and state."""
        events = self.get_all_events(self.props)
        if events:
            return build_container(self.props, self.base_props, events, self.store, self.get_shared_events)
        container = self.props.get('container') or self.props['group_component']
        return clone_element(container, {'children': self.props.get('children')})
