"""
Event and mutation descriptor value types.

Descriptors are declared by callers (``events``, ``initial_event_mutations``,
``external_event_mutations``) or returned by event handlers. Both dataclass
instances and plain mappings with the same snake_case keys are accepted;
mappings are coerced on entry so the rest of the package deals with one shape.

Descriptors are compared by value (==), which is what the shared-event cache
relies on: two lists of descriptors referencing the same handler functions
compare equal.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

ALL = 'all'
PARENT = 'parent'

# child_name / target / event_key may name one value, several, or "all"
Selector = Union[str, int, Sequence[Union[str, int]], None]


@dataclass(frozen=True)
class EventDescriptor:
    """Declarative binding of interaction handlers to a child/target scope.

    Handlers are called as ``handler(event, props, event_key, state)`` and
    return None, a Mutation, or a list of Mutations.
    """
    child_name: Selector = None
    target: Selector = None
    event_key: Selector = None
    event_handlers: Dict[str, Callable[..., Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class Mutation:
    """Declarative rule describing how an interaction (or mount) updates state.

    ``mutation`` receives the target's props merged with its current state
    and returns the new state record. Returned from an event handler it is
    called as ``mutation(props, base_props)`` and None removes the record;
    declared as an initial or external mutation it is called as
    ``mutation(props)``.
    """
    child_name: Selector = None
    target: Selector = None
    event_key: Selector = None
    mutation: Optional[Callable[[Dict[str, Any]], Any]] = None
    callback: Optional[Callable[[], None]] = None


_EVENT_FIELDS = ('child_name', 'target', 'event_key', 'event_handlers')
_MUTATION_FIELDS = ('child_name', 'target', 'event_key', 'mutation', 'callback')


def as_event_descriptor(value: Any) -> EventDescriptor:
    """Coerce a mapping into an EventDescriptor.

    Raises:
        TypeError: If value is neither an EventDescriptor nor a mapping.
    """
    if isinstance(value, EventDescriptor):
        return value
    if isinstance(value, Mapping):
        kwargs = {name: value[name] for name in _EVENT_FIELDS if name in value}
        if kwargs.get('event_handlers') is None:
            kwargs['event_handlers'] = {}
        return EventDescriptor(**kwargs)
    raise TypeError(f"Expected EventDescriptor or mapping, got {type(value).__name__}")


def as_mutation(value: Any) -> Mutation:
    """Coerce a mapping into a Mutation.

    Raises:
        TypeError: If value is neither a Mutation nor a mapping.
    """
    if isinstance(value, Mutation):
        return value
    if isinstance(value, Mapping):
        return Mutation(**{name: value[name] for name in _MUTATION_FIELDS if name in value})
    raise TypeError(f"Expected Mutation or mapping, got {type(value).__name__}")


def as_event_list(events: Any) -> List[EventDescriptor]:
    """Coerce an optional sequence of event descriptors into a list."""
    if not events:
        return []
    if isinstance(events, (EventDescriptor, Mapping)):
        events = [events]
    return [as_event_descriptor(event) for event in events]


def as_mutation_list(mutations: Any) -> List[Mutation]:
    """Coerce None, one mutation, or a sequence of mutations into a list."""
    if not mutations:
        return []
    if isinstance(mutations, (Mutation, Mapping)):
        mutations = [mutations]
    return [as_mutation(mutation) for mutation in mutations]


def is_sequence(value: Any) -> bool:
    """True for list/tuple selectors (strings are single values)."""
    return isinstance(value, (list, tuple))


def matches_child(event: EventDescriptor, name: Any) -> bool:
    """Whether an event descriptor applies to the child called name.

    Matching is literal: equality, membership in a sequence, or the "all"
    wildcard. Parent-targeted descriptors never match a child.
    """
    if event.target == PARENT:
        return False
    if is_sequence(event.child_name):
        return name in event.child_name
    return event.child_name == name or event.child_name == ALL


def selector_matches(selector: Selector, value: Any) -> bool:
    """Compare a mutation selector against an identifier by string value.

    A string selector matches "all" or an equal value; a sequence matches any
    member; anything else (including None) matches nothing.
    """
    if isinstance(selector, (str, int)) and not isinstance(selector, bool):
        return str(selector) == ALL or str(selector) == str(value)
    if is_sequence(selector):
        return str(value) in [str(item) for item in selector]
    return False
