"""
Container aggregation: compose the root element from rewritten children and
parent-targeted events.

Parent props are layered, lowest to highest priority::

    parent event state < parent base props < container props < {"children": ...}

Parent handlers resolved from ``target="parent"`` descriptors sit underneath
any ``events`` the container already declares. A container whose type has
``role = "container"`` receives the handlers as a single ``events`` prop and
resolves them itself; any other element gets them as direct props.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

from eventstate.bundle import SharedEventBundle
from eventstate.descriptors import PARENT, EventDescriptor
from eventstate.element import Element, clone_element, get_role
from eventstate.events import filter_parent_events, get_event_state, get_events, get_partial_events
from eventstate.rewriter import BundleFactory, rewrite_children
from eventstate.state import SharedState

logger = logging.getLogger(__name__)


def parent_props_for(
    container_props: Mapping[str, Any],
    parent_base_props: Optional[Mapping[str, Any]],
    parent_state: Optional[Mapping[str, Any]],
    children: Any,
) -> Dict[str, Any]:
    """Final props of the root element (see module docstring for precedence)."""
    return {
        **(parent_state or {}),
        **(parent_base_props or {}),
        **container_props,
        'children': children,
    }


def build_container(
    props: Mapping[str, Any],
    base_props: Mapping[str, Any],
    events: Sequence[EventDescriptor],
    store: SharedState,
    bundle_for: BundleFactory,
) -> Element:
    """Build the root element replacing the container.

    Args:
        props: Coordinator props (``container``, ``group_component``,
            ``children``, ``event_key``)
        base_props: Base props map including the ``parent`` entry
        events: All event descriptors (own plus component defaults)
        store: Shared state read for the parent's event state
        bundle_for: Builds or fetches per-child bundles

    Returns:
        Cloned container element
    """
    children = rewrite_children(props.get('children'), events, props.get('event_key'), base_props, bundle_for)
    parents = filter_parent_events(events)

    shared_events = SharedEventBundle(name=None, base_props=base_props, events=parents, store=store) if parents else None
    container = props.get('container') or props['group_component']
    role = get_role(container)
    container_props = dict(container.props)

    parent_events = get_events({'shared_events': shared_events}, PARENT) if shared_events is not None else {}
    parent_props = parent_props_for(
        container_props,
        base_props.get(PARENT),
        get_event_state(store.state, PARENT, PARENT),
        children,
    )
    container_events = {
        **get_partial_events(parent_events, PARENT, parent_props),
        **(container_props.get('events') or {}),
    }

    logger.debug(f"Building container role={role!r} with {len(parents)} parent event(s)")
    if role == 'container':
        return clone_element(container, {**parent_props, 'events': container_events})
    return clone_element(container, container_events, children)
