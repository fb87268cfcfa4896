"""
Base-props extraction: walk children, collect per-name structural metadata.

Participating children expose ``get_base_props(props)`` on their component
type. The result is keyed by child name, either the explicit ``name`` prop or
a positional name built from the component role and the traversal path
(``"line-1"``, ``"bar-group-0-1"``). The rewriter derives names with the same
helpers, so the two always agree.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from eventstate.element import (
    Element,
    children_to_list,
    clone_element,
    display_role,
    get_base_props_fn,
    get_role,
)

logger = logging.getLogger(__name__)


def child_name_for(child: Element, positional_name: Any) -> str:
    """Explicit ``name`` prop, or ``"{role}-{positional_name}"``."""
    name = child.props.get('name')
    if name:
        return name
    return f"{display_role(child)}-{positional_name}"


def _inherited_props(props: Dict[str, Any], inherited: Sequence[str]) -> Dict[str, Any]:
    return {name: props[name] for name in inherited if name in props}


def _nested_children(child: Element, inherited: Sequence[str]) -> List[Any]:
    """Children of a group, with inherited props applied underneath their own.

    A group type exposing ``get_children(props)`` (e.g. a stack that computes
    offsets) supplies its own list instead.
    """
    passed = _inherited_props(child.props, inherited)
    get_children = getattr(child.type, 'get_children', None) if get_role(child) == 'stack' else None
    if callable(get_children):
        return children_to_list(get_children({**child.props, **passed}))

    nested = []
    for grandchild in children_to_list(child.props.get('children')):
        if isinstance(grandchild, Element):
            grandchild = clone_element(grandchild, {**passed, **grandchild.props})
        nested.append(grandchild)
    return nested


def reduce_children(
    children: Sequence[Any],
    iteratee: Callable[[Element, str, Optional[Element]], Optional[List[Any]]],
    inherited: Sequence[str] = (),
) -> List[Any]:
    """Depth-first fold over leaf children.

    Groups (elements with nested children) are traversed into; every leaf
    element is passed to ``iteratee(child, child_name, parent)`` and its
    returned list (if any) is appended to the result.

    Args:
        children: Top-level children
        iteratee: Called for each leaf element
        inherited: Prop names passed from groups to nested children

    Returns:
        Concatenation of all iteratee results, in traversal order
    """
    def traverse(child_list: List[Any], names: List[Any], parent: Optional[Element]) -> List[Any]:
        results: List[Any] = []
        for index, child in enumerate(child_list):
            if not isinstance(child, Element):
                continue
            name = child_name_for(child, names[index])
            if children_to_list(child.props.get('children')):
                nested = _nested_children(child, inherited)
                nested_names = [f"{name}-{i}" for i in range(len(nested))]
                results.extend(traverse(nested, nested_names, child))
            else:
                result = iteratee(child, name, parent)
                if result:
                    results.extend(result)
        return results

    child_list = children_to_list(list(children))
    return traverse(child_list, list(range(len(child_list))), None)


def get_base_props_from_children(children: Sequence[Any], inherited: Sequence[str] = ()) -> Dict[str, Any]:
    """Map each participating child name to its base props.

    Children without the capability, or whose get_base_props returns nothing,
    are left out.
    """
    def iteratee(child: Element, name: str, parent: Optional[Element]) -> Optional[List[Tuple[str, Any]]]:
        get_base_props = get_base_props_fn(child)
        if get_base_props is None:
            return None
        base_props = get_base_props(child.props)
        return [(name, base_props)] if base_props else None

    pairs = reduce_children(children, iteratee, inherited)
    base_props = dict(pairs)
    logger.debug(f"Extracted base props for children: {list(base_props.keys())}")
    return base_props


def get_base_props(props: Dict[str, Any], inherited: Sequence[str] = ()) -> Dict[str, Any]:
    """Base props map for a coordinator's props, with the reserved parent entry.

    The ``parent`` entry holds the container's own props (empty without a
    container) and is always last.
    """
    container = props.get('container')
    child_base_props = get_base_props_from_children(children_to_list(props.get('children')), inherited)
    child_base_props.pop('parent', None)
    parent_base_props = dict(container.props) if isinstance(container, Element) else {}
    return {**child_base_props, 'parent': parent_base_props}
