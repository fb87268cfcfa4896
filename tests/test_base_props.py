"""Tests for base-props extraction."""
from eventstate import create_element, get_base_props, get_base_props_from_children, reduce_children
from eventstate.config import DEFAULT_INHERITED_PROP_NAMES

from components import Bar, Empty, Group, Label, Line


class Stack(Group):
    """Group that computes its own nested children."""
    role = 'stack'

    @classmethod
    def get_children(cls, props):
        return [create_element(Bar, {'data': props['data']}), create_element(Line, {'data': props['data']})]


def test_explicit_and_positional_names(bar, line):
    """Explicit name wins; otherwise '{role}-{index}'."""
    base_props = get_base_props_from_children([bar, line])

    assert list(base_props.keys()) == ['bar', 'line-1']
    assert base_props['bar'][0]['data']['datum'] == 1
    assert base_props['line-1'][0]['labels'] == {'text': '5'}


def test_non_participating_children_are_skipped(bar):
    children = [create_element(Label), bar, create_element(Empty), 'plain text']
    base_props = get_base_props_from_children(children)
    assert list(base_props.keys()) == ['bar']


def test_nested_children_are_flattened():
    """Groups are traversed into with names derived from the group path."""
    group = create_element(Group, {}, create_element(Bar, {'data': [1]}), create_element(Line, {'name': 'trend', 'data': [2]}))
    base_props = get_base_props_from_children([create_element(Label), group])

    assert list(base_props.keys()) == ['bar-group-1-0', 'trend']


def test_groups_pass_inherited_props_to_children():
    group = create_element(Group, {'data': [7, 8]}, create_element(Bar))
    base_props = get_base_props_from_children([group], DEFAULT_INHERITED_PROP_NAMES)

    assert base_props['bar-group-0-0'][1]['data']['datum'] == 8


def test_child_props_beat_inherited_props():
    group = create_element(Group, {'data': [7, 8]}, create_element(Bar, {'data': [1]}))
    base_props = get_base_props_from_children([group], DEFAULT_INHERITED_PROP_NAMES)

    assert list(base_props['bar-group-0-0'].keys()) == ['parent', 0]


def test_stack_supplies_its_own_children():
    stack = create_element(Stack, {'data': [3]}, create_element(Label), create_element(Label))
    base_props = get_base_props_from_children([stack])

    assert list(base_props.keys()) == ['bar-stack-0-0', 'line-stack-0-1']


def test_get_base_props_appends_parent_entry(bar, container):
    base_props = get_base_props({'children': [bar], 'container': container})

    assert list(base_props.keys()) == ['bar', 'parent']
    assert base_props['parent'] == {'width': 400, 'height': 300}


def test_get_base_props_without_container(bar):
    assert get_base_props({'children': bar})['parent'] == {}


def test_reduce_children_passes_parent_group():
    seen = []
    group = create_element(Group, {}, create_element(Label))

    def iteratee(child, name, parent):
        seen.append((name, parent))
        return None

    result = reduce_children([group], iteratee)

    assert result == []
    assert seen == [('label-group-0-0', group)]
