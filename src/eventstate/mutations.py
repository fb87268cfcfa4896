"""
Mutation engine: apply declarative initial/external mutations to shared state.

For every known child name, every event key in its base props (plus keys it
already has state for), and every target under that key, the matching
mutation descriptors are applied in declaration order. Each result is merged
shallowly over the current state of that target.

The engine returns None when no descriptor matched anything, so callers can
tell "nothing to do" apart from "an empty patch" and skip a state write.
Exceptions raised by mutation functions propagate to the caller.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from eventstate.descriptors import PARENT, Mutation, as_mutation_list, selector_matches
from eventstate.state import state_key

logger = logging.getLogger(__name__)


def _prune_empty(record: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in record.items() if v}


def _as_record(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


class _MutationPass:
    """One evaluation of a descriptor list, tracking whether anything applied."""

    def __init__(self, mutations: Sequence[Mutation]):
        self.mutations = list(mutations)
        self.applied = False

    def mutation_for(self, props: Any, state: Any, identifier: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Combined patch of all descriptors matching identifier, or None."""
        scoped = self.mutations
        if identifier.get('child_name'):
            scoped = [m for m in scoped if selector_matches(m.child_name, identifier['child_name'])]
        scoped = [m for m in scoped if selector_matches(m.target, identifier['target'])]
        scoped = [m for m in scoped if selector_matches(m.event_key, identifier['event_key'])]
        if not scoped:
            return None

        self.applied = True
        merged_input = {**_as_record(props), **_as_record(state)}
        result: Dict[str, Any] = {}
        for descriptor in scoped:
            if not callable(descriptor.mutation):
                continue
            patch = descriptor.mutation(dict(merged_input))
            if patch:
                result.update(patch)
        return result

    def mutations_for_child(self, child_props: Any, child_state: Any, child_name: Any) -> Dict[str, Any]:
        """New state record for one child, keyed by event key then target."""
        child_props = _as_record(child_props)
        child_state = _as_record(child_state)
        result: Dict[str, Any] = {}

        keys = [state_key(k) for k in child_props]
        keys += [k for k in child_state if k not in keys]
        props_by_key = {state_key(k): v for k, v in child_props.items()}

        for key in keys:
            key_state = _as_record(child_state.get(key))
            key_props = _as_record(props_by_key.get(key))
            if key == PARENT:
                identifier = {'event_key': key, 'target': PARENT, 'child_name': child_name}
                mutation = self.mutation_for(key_props, key_state, identifier)
                result[key] = {**key_state, **mutation} if mutation is not None else key_state
            else:
                targets = list(key_props) + [t for t in key_state if t not in key_props]
                by_target: Dict[str, Any] = {}
                for target in targets:
                    identifier = {'event_key': key, 'target': target, 'child_name': child_name}
                    target_state = _as_record(key_state.get(target))
                    mutation = self.mutation_for(key_props.get(target), target_state, identifier)
                    by_target[target] = {**target_state, **mutation} if mutation is not None else key_state.get(target)
                result[key] = _prune_empty(by_target)
        return _prune_empty(result)

    def parent_mutation(self, parent_props: Any, parent_state: Any) -> Dict[str, Any]:
        """New flat parent record (the container's props act as its base props)."""
        identifier = {'child_name': PARENT, 'event_key': PARENT, 'target': PARENT}
        current = _as_record(parent_state)
        mutation = self.mutation_for(parent_props, current, identifier)
        return {**current, **mutation} if mutation is not None else current


def get_external_mutations_with_children(
    mutations: Any,
    base_props: Optional[Mapping[str, Any]],
    state: Optional[Mapping[str, Any]],
    child_names: Sequence[Any],
) -> Optional[Dict[str, Any]]:
    """Compute the state patch produced by mutation descriptors.

    Args:
        mutations: Mutation descriptors (Mutation instances or mappings)
        base_props: Base props map (child name -> event key -> target -> props)
        state: Current shared state
        child_names: Names to evaluate, usually the keys of base_props

    Returns:
        Patch keyed by child name, or None if no descriptor applied
    """
    descriptors = as_mutation_list(mutations)
    if not descriptors:
        return None

    base_props = base_props or {}
    state = state or {}
    mutation_pass = _MutationPass(descriptors)
    patch: Dict[str, Any] = {}

    for child_name in child_names:
        if child_name == PARENT:
            record = mutation_pass.parent_mutation(base_props.get(PARENT), state.get(PARENT))
        else:
            record = mutation_pass.mutations_for_child(base_props.get(child_name), state.get(child_name), child_name)
        if record:
            patch[child_name] = record

    if not mutation_pass.applied:
        return None
    logger.debug(f"Computed mutations for children: {list(patch.keys())}")
    return patch


def compute_mutations(props: Mapping[str, Any], base_props: Mapping[str, Any], state: Mapping[str, Any], kind: str = 'external_event_mutations') -> Optional[Dict[str, Any]]:
    """Mutations of the given kind declared in props, evaluated against state.

    Args:
        props: Coordinator props holding ``initial_event_mutations`` /
            ``external_event_mutations``
        base_props: Current base props map
        state: Current shared state
        kind: Which props entry to evaluate

    Returns:
        State patch, or None when the list is empty or nothing applied
    """
    mutations = props.get(kind)
    if not mutations:
        return None
    return get_external_mutations_with_children(mutations, base_props, state, list(base_props.keys()))


def collect_callbacks(mutations: Any) -> List[Callable[[], None]]:
    """Callable ``callback`` fields of the descriptors, in declaration order."""
    return [m.callback for m in as_mutation_list(mutations) if callable(m.callback)]
