"""Tests for the fingerprint-validated shared events cache."""
import pytest

from eventstate import EventDescriptor, Fingerprint, SharedEventsCache


@pytest.fixture
def fingerprint():
    return Fingerprint.create('bar', {'bar': {0: {}}}, [EventDescriptor(child_name='bar', target='data')], {'0': {'data': {}}})


def test_put_then_get_with_equal_fingerprint(fingerprint):
    cache = SharedEventsCache()
    bundle = object()
    cache.put('bar', bundle, fingerprint)

    # A separately built but deep-equal fingerprint is a hit
    same = Fingerprint.create('bar', {'bar': {0: {}}}, [EventDescriptor(child_name='bar', target='data')], {'0': {'data': {}}})
    assert cache.get('bar', same) is bundle
    assert cache.stats()['hits'] == 1


@pytest.mark.parametrize('changed', [
    Fingerprint.create('bar', {'bar': {0: {'x': 1}}}, [EventDescriptor(child_name='bar', target='data')], {'0': {'data': {}}}),
    Fingerprint.create('bar', {'bar': {0: {}}}, [EventDescriptor(child_name='bar', target='labels')], {'0': {'data': {}}}),
    Fingerprint.create('bar', {'bar': {0: {}}}, [EventDescriptor(child_name='bar', target='data')], {'0': {'data': {'on': 1}}}),
    Fingerprint.create('line', {'bar': {0: {}}}, [EventDescriptor(child_name='bar', target='data')], {'0': {'data': {}}}),
])
def test_any_component_change_misses(fingerprint, changed):
    cache = SharedEventsCache()
    cache.put('bar', object(), fingerprint)
    assert cache.get('bar', changed) is None


def test_get_or_create_rebuilds_and_overwrites(fingerprint):
    cache = SharedEventsCache()
    first = cache.get_or_create('bar', fingerprint, object)
    assert cache.get_or_create('bar', fingerprint, object) is first

    changed = Fingerprint.create('bar', {}, [], None)
    second = cache.get_or_create('bar', changed, object)
    assert second is not first
    assert cache.get_or_create('bar', changed, object) is second
    assert len(cache) == 1


def test_disabled_cache_always_misses(fingerprint):
    cache = SharedEventsCache(enabled=False)
    first = cache.get_or_create('bar', fingerprint, object)
    assert cache.get_or_create('bar', fingerprint, object) is not first
    assert cache.stats() == {'hits': 0, 'misses': 2, 'entries': 1}


def test_invalidate(fingerprint):
    cache = SharedEventsCache()
    cache.put('bar', object(), fingerprint)
    assert 'bar' in cache
    cache.invalidate()
    assert 'bar' not in cache
    assert cache.get('bar', fingerprint) is None


def test_fingerprint_handles_cyclic_state():
    state = {'0': {}}
    state['0']['loop'] = state
    a = Fingerprint.create('bar', {}, [], state)
    b = Fingerprint.create('bar', {}, [], state)
    assert a == b
