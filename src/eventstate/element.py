"""
Element model for coordinated component trees.

Elements are immutable descriptions of a component in a tree: a component
type, its props and an optional key. Children live under ``props["children"]``.
The rendering engine that turns elements into drawn output is not part of
this package; it only needs to accept the elements produced here.

Component capabilities are probed by attribute presence, never by type:
- ``get_base_props(props)``: opts a component into event coordination
- ``role``: "container" changes how the container receives its handlers
- ``default_events``: extra event descriptors contributed by the component
- ``get_children(props)``: a group that computes its own nested children
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Element:
    """Immutable tree node.

    ``type`` is either a component class or a host tag string such as "g".
    Props are never mutated after construction; use clone_element() to derive
    a modified copy.
    """
    type: Any
    props: Dict[str, Any] = field(default_factory=dict)
    key: Optional[str] = None

    @property
    def children(self) -> List[Any]:
        return children_to_list(self.props.get('children'))

    def __repr__(self) -> str:
        type_name = self.type if isinstance(self.type, str) else getattr(self.type, '__name__', repr(self.type))
        return f"Element({type_name}, key={self.key!r}, props={sorted(self.props)})"


class Component:
    """Base class for renderable components.

    Subclasses opt into event coordination by defining a ``get_base_props``
    classmethod. Components without it are passed through untouched.
    """
    role: Optional[str] = None
    default_events: Any = None


def create_element(type_: Any, props: Optional[Dict[str, Any]] = None, *children: Any, key: Optional[str] = None) -> Element:
    """Create an element, placing positional children under ``props["children"]``."""
    new_props = dict(props or {})
    if children:
        new_props['children'] = children_to_list(list(children))
    return Element(type=type_, props=new_props, key=key)


def clone_element(element: Element, props: Optional[Dict[str, Any]] = None, children: Any = None) -> Element:
    """Return a copy of element with props merged over its own.

    A ``key`` entry in props replaces the element key instead of becoming a prop.
    When children is given it replaces ``props["children"]``.

    Raises:
        TypeError: If element is not an Element.
    """
    if not isinstance(element, Element):
        raise TypeError(f"clone_element() expects an Element, got {type(element).__name__}")

    new_props = dict(element.props)
    key = element.key
    for name, value in (props or {}).items():
        if name == 'key':
            key = value
        else:
            new_props[name] = value
    if children is not None:
        new_props['children'] = children
    return Element(type=element.type, props=new_props, key=key)


def children_to_list(children: Any) -> List[Any]:
    """Flatten a children value into a list, dropping None and booleans."""
    if children is None or isinstance(children, bool):
        return []
    if isinstance(children, (list, tuple)):
        result: List[Any] = []
        for child in children:
            result.extend(children_to_list(child))
        return result
    return [children]


def has_children(child: Any) -> bool:
    """True if child is an element carrying nested children."""
    return isinstance(child, Element) and bool(children_to_list(child.props.get('children')))


def get_base_props_fn(child: Any) -> Optional[Callable[[Dict[str, Any]], Any]]:
    """Return the child's get_base_props capability, or None if it has none."""
    if not isinstance(child, Element) or isinstance(child.type, str):
        return None
    fn = getattr(child.type, 'get_base_props', None)
    return fn if callable(fn) else None


def get_role(element: Any) -> Optional[str]:
    """Role tag declared by the element's component type (None for host tags)."""
    if not isinstance(element, Element) or isinstance(element.type, str):
        return None
    return getattr(element.type, 'role', None)


def display_role(element: Element) -> str:
    """Role used for positional child names.

    Falls back to the host tag or the lowercased class name when the type
    declares no role.
    """
    role = get_role(element)
    if role:
        return role
    if isinstance(element.type, str):
        return element.type
    return getattr(element.type, '__name__', 'component').lower()
