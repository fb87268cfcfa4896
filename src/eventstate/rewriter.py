"""
Tree rewriter: rebuild the child tree with shared event bundles injected.

Every level produces a fresh list; input elements are never mutated. Groups
are rebuilt around their rewritten children, participating children are
cloned with ``shared_events``, ``event_key``, ``name`` and a stable key
underneath their own props, and everything else is passed through as-is.
"""

import logging
from typing import Any, Callable, List, Mapping, Sequence

from eventstate.base_props import child_name_for
from eventstate.bundle import SharedEventBundle
from eventstate.descriptors import EventDescriptor
from eventstate.element import Element, children_to_list, clone_element, get_base_props_fn
from eventstate.events import filter_child_events

logger = logging.getLogger(__name__)

# (name, child_events) -> bundle; the coordinator supplies a cached version
BundleFactory = Callable[[str, List[EventDescriptor]], SharedEventBundle]


def rewrite_children(
    children: Any,
    events: Sequence[EventDescriptor],
    event_key: Any,
    base_props: Mapping[str, Any],
    bundle_for: BundleFactory,
) -> List[Any]:
    """Return a new child list with bundles attached to participating children.

    Args:
        children: Children value (element, list, or None)
        events: All non-parent event descriptors
        event_key: Coordinator-level event key injected into each child
        base_props: Base props map (only used for logging the known names)
        bundle_for: Builds or fetches the bundle for a child

    Returns:
        Rewritten children, same order
    """
    def alter(child_list: List[Any], names: List[Any]) -> List[Any]:
        rewritten: List[Any] = []
        for index, child in enumerate(child_list):
            if not isinstance(child, Element):
                rewritten.append(child)
                continue
            name = child_name_for(child, names[index])
            nested = children_to_list(child.props.get('children'))
            if nested:
                nested_names = [f"{name}-{i}" for i in range(len(nested))]
                rewritten.append(clone_element(child, children=alter(nested, nested_names)))
            elif get_base_props_fn(child) is not None:
                child_events = filter_child_events(events, name)
                shared_events = bundle_for(name, child_events)
                injected = {'key': f"events-{name}", 'shared_events': shared_events, 'event_key': event_key, 'name': name}
                rewritten.append(clone_element(child, {**injected, **child.props}))
            else:
                rewritten.append(child)
        return rewritten

    child_list = children_to_list(children)
    logger.debug(f"Rewriting {len(child_list)} children against {len(base_props)} base props entries")
    return alter(child_list, list(range(len(child_list))))
