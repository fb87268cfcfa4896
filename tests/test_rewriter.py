"""Tests for tree rewriting."""
from eventstate import EventDescriptor, SharedEventBundle, SharedState, create_element, get_base_props, rewrite_children

from components import Bar, Group, Label, Line


def _bundle_recorder(base_props):
    calls = []
    store = SharedState()

    def bundle_for(name, child_events):
        calls.append((name, child_events))
        return SharedEventBundle(name=name, base_props=base_props, events=child_events, store=store)

    return bundle_for, calls


def test_participating_children_receive_bundle(bar, line):
    children = [bar, line]
    base_props = get_base_props({'children': children})
    events = [
        EventDescriptor(child_name='all', target='data'),
        EventDescriptor(child_name='bar', target='labels'),
        EventDescriptor(target='parent'),
    ]
    bundle_for, calls = _bundle_recorder(base_props)

    rewritten = rewrite_children(children, events, 7, base_props, bundle_for)

    assert [child.key for child in rewritten] == ['events-bar', 'events-line-1']
    assert rewritten[0].props['name'] == 'bar'
    assert rewritten[1].props['name'] == 'line-1'
    assert rewritten[1].props['event_key'] == 7
    assert rewritten[0].props['shared_events'].events == events[:2]
    assert rewritten[1].props['shared_events'].events == events[:1]
    assert [name for name, _ in calls] == ['bar', 'line-1']


def test_non_participating_children_pass_through_unchanged(bar):
    label = create_element(Label, {'text': 'title'})
    children = [label, bar, 'raw']
    base_props = get_base_props({'children': children})
    bundle_for, _ = _bundle_recorder(base_props)

    rewritten = rewrite_children(children, [], None, base_props, bundle_for)

    assert rewritten[0] is label
    assert rewritten[2] == 'raw'
    for key in ('event_key', 'name', 'shared_events'):
        assert key not in rewritten[0].props


def test_own_props_win_over_injected(bar):
    child = create_element(Bar, {'name': 'bar', 'event_key': 'own', 'data': [1]})
    base_props = get_base_props({'children': [child]})
    bundle_for, _ = _bundle_recorder(base_props)

    rewritten = rewrite_children([child], [], 'injected', base_props, bundle_for)
    assert rewritten[0].props['event_key'] == 'own'


def test_nested_groups_are_rebuilt_with_matching_names():
    group = create_element(Group, {'data': [1]}, create_element(Bar, {'data': [1]}), create_element(Label))
    children = [create_element(Line, {'data': [3]}), group]
    base_props = get_base_props({'children': children})
    bundle_for, calls = _bundle_recorder(base_props)

    rewritten = rewrite_children(children, [], None, base_props, bundle_for)

    assert [name for name, _ in calls] == ['line-0', 'bar-group-1-0']
    assert set(base_props.keys()) == {'line-0', 'bar-group-1-0', 'parent'}
    nested = rewritten[1].props['children']
    assert nested[0].props['name'] == 'bar-group-1-0'
    assert nested[1] is group.props['children'][1]
    assert rewritten[1].props['data'] == [1]


def test_input_tree_is_not_mutated(bar):
    group = create_element(Group, {}, bar)
    children = [group]
    original_children = list(group.props['children'])
    base_props = get_base_props({'children': children})
    bundle_for, _ = _bundle_recorder(base_props)

    rewrite_children(children, [], None, base_props, bundle_for)

    assert group.props['children'] == original_children
    assert 'shared_events' not in bar.props
