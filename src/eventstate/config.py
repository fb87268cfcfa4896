"""
Process-wide configuration for event coordination.

A single current EventStateConfig is stored at module level. Coordinators
read it at construction unless an explicit config is passed, so tests and
applications can swap defaults without threading a config object through
every call.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

# Props a group passes down to nested children that do not set them
DEFAULT_INHERITED_PROP_NAMES: Tuple[str, ...] = (
    'data',
    'domain',
    'categories',
    'polar',
    'start_angle',
    'end_angle',
    'min_domain',
    'max_domain',
    'horizontal',
)


@dataclass(frozen=True)
class EventStateConfig:
    """Configuration for SharedEventsCoordinator.

    Attributes:
        cache_shared_events: Reuse per-child event bundles while their
            fingerprint is unchanged. When False every render rebuilds them.
        inherited_prop_names: Props copied from a group onto its nested
            children before their base props are computed.
        default_group_tag: Host tag of the wrapping element used when neither
            ``container`` nor ``group_component`` is supplied.
    """
    cache_shared_events: bool = True
    inherited_prop_names: Tuple[str, ...] = DEFAULT_INHERITED_PROP_NAMES
    default_group_tag: str = 'g'


_current_config: Optional[EventStateConfig] = None


def set_current_config(config: EventStateConfig) -> None:
    """Set the config used by coordinators created without an explicit one.

    Args:
        config: The config instance to install
    """
    global _current_config
    _current_config = config


def get_current_config() -> EventStateConfig:
    """Get the current config, falling back to defaults when none is set."""
    if _current_config is None:
        return EventStateConfig()
    return _current_config


def reset_config() -> None:
    """Restore default configuration."""
    global _current_config
    _current_config = None
