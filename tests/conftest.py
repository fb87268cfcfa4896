"""Pytest configuration and shared fixtures."""
import pytest

from eventstate import create_element
import eventstate.config as config_module

from components import Bar, ChartContainer, Line


@pytest.fixture(autouse=True)
def reset_config():
    """Restore default configuration after each test."""
    original = config_module._current_config
    yield
    config_module._current_config = original


@pytest.fixture
def bar():
    """Named bar with two datums."""
    return create_element(Bar, {'name': 'bar', 'data': [1, 2]})


@pytest.fixture
def line():
    """Unnamed line with one datum (positional name "line-1" when second)."""
    return create_element(Line, {'data': [5]})


@pytest.fixture
def container():
    """Container element with its own props."""
    return create_element(ChartContainer, {'width': 400, 'height': 300})
