"""Tests for the element model and capability probing."""
import pytest

from eventstate import Element, clone_element, create_element, children_to_list
from eventstate.element import display_role, get_base_props_fn, get_role, has_children

from components import Bar, ChartContainer, Label


def test_create_element_places_children_in_props():
    """Positional children are flattened into props['children']."""
    child = create_element(Label)
    parent = create_element('g', {'x': 1}, child, [None, 'text'])

    assert parent.props['x'] == 1
    assert parent.props['children'] == [child, 'text']
    assert parent.children == [child, 'text']


def test_clone_element_merges_props_and_key():
    """Clone merges props over the original and treats key specially."""
    original = create_element(Bar, {'name': 'bar', 'data': [1]})
    clone = clone_element(original, {'key': 'events-bar', 'event_key': 3})

    assert clone.key == 'events-bar'
    assert clone.props == {'name': 'bar', 'data': [1], 'event_key': 3}
    assert 'key' not in clone.props
    # Original untouched
    assert original.props == {'name': 'bar', 'data': [1]}
    assert original.key is None


def test_clone_element_replaces_children():
    original = create_element('g', None, create_element(Label))
    clone = clone_element(original, None, ['only'])
    assert clone.props['children'] == ['only']


def test_clone_element_rejects_non_elements():
    with pytest.raises(TypeError):
        clone_element({'type': 'g'})


def test_children_to_list_drops_none_and_booleans():
    assert children_to_list(None) == []
    assert children_to_list(False) == []
    assert children_to_list([1, [2, None, [3]], True]) == [1, 2, 3]


def test_capability_probing():
    """Only component types defining get_base_props participate."""
    assert get_base_props_fn(create_element(Bar)) is not None
    assert get_base_props_fn(create_element(Label)) is None
    assert get_base_props_fn(create_element('g')) is None
    assert get_base_props_fn('text') is None


def test_roles():
    assert get_role(create_element(ChartContainer)) == 'container'
    assert get_role(create_element('g')) is None
    assert display_role(create_element('g')) == 'g'
    assert display_role(create_element(Bar)) == 'bar'


def test_has_children():
    assert has_children(create_element('g', None, create_element(Label)))
    assert not has_children(create_element('g'))
    assert not has_children('text')


def test_elements_compare_by_value():
    a = create_element(Bar, {'data': [1, 2]})
    b = create_element(Bar, {'data': [1, 2]})
    assert a == b
    assert isinstance(a, Element)
