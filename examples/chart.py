"""
Composite chart with shared hover highlighting.

Two series share one interaction state: hovering a bar highlights the bar and
the label of the same datum in the line series. The tree is printed after
each step instead of being drawn.
"""

import logging

from eventstate import (
    Component,
    EventDescriptor,
    Mutation,
    SharedEventsCoordinator,
    create_element,
    get_events,
)

logger = logging.getLogger(__name__)


class Series(Component):
    """Minimal chart primitive: one record per datum."""
    role = 'series'

    @classmethod
    def get_base_props(cls, props):
        return {
            index: {'data': {'datum': datum}, 'labels': {'text': f"{datum}"}}
            for index, datum in enumerate(props.get('data') or [])
        }


class Chart(Component):
    """Root container that resolves its own events prop."""
    role = 'container'


def highlight(event, props, event_key, state):
    return [
        Mutation(target='data', mutation=lambda p, base_props: {'style': {'fill': 'orange'}}),
        Mutation(child_name='line', target='labels', mutation=lambda p, base_props: {'active': True}),
    ]


def main():
    logging.basicConfig(level=logging.DEBUG, format='%(name)s %(levelname)s %(message)s')

    coordinator = SharedEventsCoordinator({
        'container': create_element(Chart, {'width': 400, 'height': 300}),
        'children': [
            create_element(Series, {'name': 'bar', 'data': [3, 5, 2]}),
            create_element(Series, {'name': 'line', 'data': [1, 4, 6]}),
        ],
        'events': [EventDescriptor(child_name='bar', target='data', event_handlers={'on_mouse_over': highlight})],
        'initial_event_mutations': [
            Mutation(child_name='line', target='data', event_key=0, mutation=lambda p: {'style': {'stroke': 'gray'}}),
        ],
    })
    coordinator.mount()

    root = coordinator.render()
    bar = root.props['children'][0]
    get_events(bar.props, 'data')['on_mouse_over']({'type': 'mouseover'}, {}, 1)

    logger.info(f"State after hover: {coordinator.state}")
    root = coordinator.render()
    for child in root.props['children']:
        logger.info(f"{child!r}")

    coordinator.unmount()


if __name__ == '__main__':
    main()
