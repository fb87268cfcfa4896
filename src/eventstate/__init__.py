"""
Shared event and mutation coordination for component trees.

A container (e.g. a composite chart) and its named sub-components share one
source of truth for interaction state (hover, click, focus). Sub-components
do not wire their own events: the coordinator extracts their base props,
resolves scoped handlers, applies declarative mutations and hands each child
a cached bundle of name-bound event accessors.

Key Features:
- Capability-based participation (components opt in with get_base_props)
- Declarative initial and external mutations
- Fingerprint-validated bundle cache (never serves a stale binding)
- Parent-targeted events merged into the root container

Quick Start:
    >>> from eventstate import SharedEventsCoordinator, EventDescriptor, Mutation, create_element
    >>>
    >>> coordinator = SharedEventsCoordinator({
    ...     'children': [create_element(Bar, {'name': 'bar', 'data': data})],
    ...     'events': [EventDescriptor(
    ...         child_name='bar',
    ...         target='data',
    ...         event_handlers={'on_click': lambda *args: Mutation(
    ...             target='data', mutation=lambda props, base_props: {'style': {'fill': 'red'}},
    ...         )},
    ...     )],
    ... })
    >>> coordinator.mount()
    >>> tree = coordinator.render()

Modules:
    - element: immutable element model and capability probing
    - descriptors: event and mutation descriptor value types
    - state: coordinator-owned shared state store
    - base_props: base-props extraction from children
    - events: scoped event resolution and event-state lookup
    - mutations: initial/external mutation engine
    - cache: fingerprint-validated bundle cache
    - bundle: per-child shared event bundle
    - rewriter: child tree rewriting
    - container: root container aggregation
    - coordinator: lifecycle owner
    - config: process-wide configuration
"""

# Element model
from eventstate.element import (
    Component,
    Element,
    create_element,
    clone_element,
    children_to_list,
)

# Descriptors
from eventstate.descriptors import (
    ALL,
    PARENT,
    EventDescriptor,
    Mutation,
)

# State
from eventstate.state import SharedState, safe_stringify

# Extraction
from eventstate.base_props import (
    get_base_props,
    get_base_props_from_children,
    reduce_children,
)

# Resolution
from eventstate.events import (
    get_scoped_events,
    get_event_state,
    get_events,
    get_partial_events,
    get_component_events,
    filter_child_events,
)

# Mutations
from eventstate.mutations import (
    compute_mutations,
    get_external_mutations_with_children,
)

# Cache and bundles
from eventstate.cache import Fingerprint, SharedEventsCache
from eventstate.bundle import SharedEventBundle

# Tree assembly
from eventstate.rewriter import rewrite_children
from eventstate.container import build_container

# Coordinator
from eventstate.coordinator import SharedEventsCoordinator

# Configuration
from eventstate.config import (
    EventStateConfig,
    get_current_config,
    set_current_config,
    reset_config,
)

__all__ = [
    # Element model
    'Component',
    'Element',
    'create_element',
    'clone_element',
    'children_to_list',
    # Descriptors
    'ALL',
    'PARENT',
    'EventDescriptor',
    'Mutation',
    # State
    'SharedState',
    'safe_stringify',
    # Extraction
    'get_base_props',
    'get_base_props_from_children',
    'reduce_children',
    # Resolution
    'get_scoped_events',
    'get_event_state',
    'get_events',
    'get_partial_events',
    'get_component_events',
    'filter_child_events',
    # Mutations
    'compute_mutations',
    'get_external_mutations_with_children',
    # Cache and bundles
    'Fingerprint',
    'SharedEventsCache',
    'SharedEventBundle',
    # Tree assembly
    'rewrite_children',
    'build_container',
    # Coordinator
    'SharedEventsCoordinator',
    # Configuration
    'EventStateConfig',
    'get_current_config',
    'set_current_config',
    'reset_config',
]

__version__ = '1.0.0'
__description__ = 'Shared event and mutation coordination for component trees'
