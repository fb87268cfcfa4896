"""
Scoped event resolution.

Turns declared handler maps into bound handlers for one child (or for the
parent container), and reads back the state those handlers have written.

A bound handler calls the user handler with
``(event, props, event_key, state)``. Whatever Mutation(s) it returns are
parsed against the base props map into a new state, which is written to the
coordinator-owned SharedState in one set_state() call. Callbacks attached to
the returned mutations run after that merge. Each returned mutation function
is called as ``mutation(props, base_props)`` so it can read sibling children.

The resolver never owns state: every function receives the store (or a
state mapping) explicitly.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from eventstate.descriptors import (
    ALL,
    PARENT,
    EventDescriptor,
    Mutation,
    as_event_list,
    as_mutation_list,
    is_sequence,
    matches_child,
)
from eventstate.state import SharedState, lookup, state_key

logger = logging.getLogger(__name__)

BoundHandler = Callable[..., None]


def filter_child_events(events: Sequence[EventDescriptor], name: Any) -> List[EventDescriptor]:
    """Event descriptors that apply to the named child (parent targets excluded)."""
    return [event for event in events if matches_child(event, name)]


def filter_parent_events(events: Sequence[EventDescriptor]) -> List[EventDescriptor]:
    """Event descriptors targeting the parent container."""
    return [event for event in events if event.target == PARENT]


def _non_parent_keys(mapping: Any) -> List[Any]:
    if not isinstance(mapping, Mapping):
        return []
    return [key for key in mapping if key != PARENT]


def _target_props(source: Mapping[str, Any], child_name: Any, key: Any, target: Any) -> Any:
    """Look up the record for (child_name, key, target) in base props or state."""
    child_record = lookup(source, child_name) if child_name is not None else None
    base = child_record if child_record else source
    if key == PARENT:
        return lookup(base, PARENT)
    key_record = lookup(base, key)
    return lookup(key_record, target) if key_record else None


def _apply_mutation(
    working: Dict[str, Any],
    descriptor: Mutation,
    base_props: Mapping[str, Any],
    child_name: Any,
    key: Any,
    target: Any,
) -> None:
    """Apply one mutation to the working state copy.

    Only the child and key records on the written path are copied; everything
    else stays shared with the input state.
    """
    if not callable(descriptor.mutation):
        return

    props = _target_props(base_props, child_name, key, target) or {}
    current = _target_props(working, child_name, key, target) or {}
    mutated = descriptor.mutation({**props, **current}, base_props)

    if child_name is not None:
        scope = dict(working.get(child_name) or {})
    else:
        scope = working
    skey = state_key(key)

    if mutated is not None:
        if target == PARENT:
            scope[skey] = {**(scope.get(skey) or {}), **mutated}
        else:
            scope[skey] = {**(scope.get(skey) or {}), target: mutated}
    else:
        key_record = dict(scope.get(skey) or {})
        key_record.pop(target, None)
        if key_record:
            scope[skey] = key_record
        else:
            scope.pop(skey, None)

    if child_name is not None:
        working[child_name] = scope


def _mutation_keys(descriptor: Mutation, child_name: Any, target: Any, event_key: Any, base_props: Mapping[str, Any]) -> List[Any]:
    if target == PARENT:
        return [PARENT]
    if descriptor.event_key == ALL:
        child_record = lookup(base_props, child_name) if child_name is not None else None
        return _non_parent_keys(child_record if child_record else base_props)
    if descriptor.event_key is None and event_key == PARENT:
        return [PARENT]
    key = descriptor.event_key if descriptor.event_key is not None else event_key
    return list(key) if is_sequence(key) else [key]


def parse_event_return(
    event_return: Any,
    event_key: Any,
    namespace: Any,
    child_type: Any,
    base_props: Mapping[str, Any],
    state: Mapping[str, Any],
) -> Dict[str, Any]:
    """Compute the state that results from a handler's returned mutations.

    Args:
        event_return: Mutation, mapping, or list of them returned by a handler
        event_key: Key of the element that fired the event
        namespace: Target the handler was resolved for ("data", "parent", ...)
        child_type: Name of the child the handler is bound to (None for parent)
        base_props: Base props map of the coordinator
        state: Current shared state

    Returns:
        The complete new state mapping
    """
    working = dict(state)
    for descriptor in as_mutation_list(event_return):
        if namespace == PARENT:
            child_names = descriptor.child_name
        else:
            child_names = descriptor.child_name or child_type
        target = descriptor.target or namespace

        if child_names == ALL:
            child_names = _non_parent_keys(base_props)
        names = list(child_names) if is_sequence(child_names) else [child_names]

        for child_name in names:
            for key in _mutation_keys(descriptor, child_name, target, event_key, base_props):
                _apply_mutation(working, descriptor, base_props, child_name, key, target)
    return working


def compile_callbacks(event_return: Any) -> Optional[Callable[[], None]]:
    """Combine the callbacks of returned mutations into one callable (or None)."""
    callbacks = [m.callback for m in as_mutation_list(event_return) if callable(m.callback)]
    if not callbacks:
        return None

    def run_callbacks() -> None:
        for callback in callbacks:
            callback()
    return run_callbacks


def get_scoped_events(
    handlers: Optional[Mapping[str, Callable[..., Any]]],
    namespace: Any,
    child_type: Any,
    base_props: Mapping[str, Any],
    store: SharedState,
) -> Dict[str, BoundHandler]:
    """Bind a handler map to a child name and target.

    Args:
        handlers: Interaction name -> user handler
        namespace: Target the handlers act on ("data", "labels", "parent")
        child_type: Child name (None when resolving for the parent container)
        base_props: Base props map the mutations are computed against
        store: Shared state that receives the resulting mutations

    Returns:
        Interaction name -> bound handler ``(event, child_props=None,
        event_key=None, event_name=None)``
    """
    if not handlers:
        return {}

    def make_handler(event_name: str) -> BoundHandler:
        def on_event(event: Any, child_props: Any = None, event_key: Any = None, name: Optional[str] = None) -> None:
            event_return = handlers[event_name](event, child_props, event_key, store.state)
            if not event_return:
                return
            new_state = parse_event_return(event_return, event_key, namespace, child_type, base_props, store.state)
            logger.debug(f"Event '{event_name}' on {child_type or PARENT}/{namespace} key={event_key!r} mutated state")
            store.set_state(new_state, compile_callbacks(event_return))
        return on_event

    return {event_name: make_handler(event_name) for event_name in handlers}


def get_partial_events(events: Optional[Mapping[str, BoundHandler]], event_key: Any, child_props: Any) -> Dict[str, Callable[[Any], None]]:
    """Pre-bind props and key so each handler only needs the event payload."""
    if not events:
        return {}

    def make_partial(event_name: str) -> Callable[[Any], None]:
        def partial(event: Any) -> None:
            events[event_name](event, child_props, event_key, event_name)
        return partial

    return {event_name: make_partial(event_name) for event_name in events}


def get_event_state(state: Mapping[str, Any], event_key: Any, namespace: Any, child_type: Any = None) -> Dict[str, Any]:
    """Current state patch for (child, key, target), or {} when absent.

    Without a child, the lookup is ``state[key][target]``; for the parent key
    it falls back to the flat ``state["parent"]`` record.
    """
    if not child_type:
        key_record = lookup(state, event_key)
        if event_key == PARENT:
            found = lookup(key_record, namespace) or key_record
        else:
            found = lookup(key_record, namespace)
        return found or {}
    child_record = lookup(state, child_type)
    key_record = lookup(child_record, event_key)
    return lookup(key_record, namespace) or {}


def _key_matches(selector: Any, event_key: Any) -> bool:
    # Falsy selectors (None, "", 0) match every key.
    return str(selector) == str(event_key) if selector else True


def get_events_by_target(events: Any, target: Any, event_key: Any = None) -> Dict[str, Callable[..., Any]]:
    """Merge the handler maps of descriptors that apply to target (and key)."""
    selected = []
    for event in as_event_list(events):
        if event.target is not None:
            if is_sequence(event.target):
                if target not in event.target:
                    continue
            elif str(event.target) != str(target):
                continue
        if event_key is not None:
            keys = event.event_key if is_sequence(event.event_key) else [event.event_key]
            if not any(_key_matches(k, event_key) for k in keys):
                continue
        selected.append(event)

    merged: Dict[str, Callable[..., Any]] = {}
    for event in selected:
        merged.update(event.event_handlers)
    return merged


def get_events(
    props: Mapping[str, Any],
    target: Any,
    event_key: Any = None,
    get_scoped_events: Optional[Callable[[Dict[str, Any], Any], Dict[str, BoundHandler]]] = None,
) -> Dict[str, BoundHandler]:
    """Resolve the handlers a component should attach for target.

    Shared events come from ``props["shared_events"]`` (a SharedEventBundle);
    the component's own ``props["events"]`` are resolved through
    get_scoped_events when the caller supplies one. Own events win on name
    collisions.
    """
    shared_events = props.get('shared_events')
    resolved: Dict[str, BoundHandler] = {}
    if shared_events is not None and shared_events.events:
        handlers = get_events_by_target(shared_events.events, target, event_key)
        resolved.update(shared_events.get_events(handlers, target))
    if get_scoped_events is not None and props.get('events'):
        handlers = get_events_by_target(props['events'], target, event_key)
        resolved.update(get_scoped_events(handlers, target))
    return resolved


def get_component_events(props: Mapping[str, Any], components: Sequence[str]) -> Optional[List[EventDescriptor]]:
    """Collect ``default_events`` declared by the named component props.

    ``default_events`` may be a list of descriptors or a callable receiving
    the element props. Returns None when nothing was contributed.
    """
    collected: List[EventDescriptor] = []
    for component_name in components:
        component = props.get(component_name)
        component_type = getattr(component, 'type', None)
        if component_type is None or isinstance(component_type, str):
            continue
        default_events = getattr(component_type, 'default_events', None)
        if callable(default_events):
            default_events = default_events(component.props)
        collected.extend(as_event_list(default_events))
    return collected or None
