"""Externally driven navigation over an anyio object stream.

A host environment (a browser bridge, a desktop webview, a test) reports
location changes the router did not initiate, such as back/forward, by
sending them into a memory object stream. ``follow()`` applies each one
as a replace-navigation until the stream is closed::

    send, receive = open_location_channel()

    async with anyio.create_task_group() as tg:
        tg.start_soon(follow, router, receive)
        await send.send("/users/=42")
        await send.aclose()
"""

import logging

import anyio
from anyio.abc import ObjectReceiveStream, ObjectSendStream

from stackrouter.router import Router
from stackrouter.routing.route import Location

logger = logging.getLogger("stackrouter.events")

type LocationEvent = str | Location


def open_location_channel(
    max_buffer_size: float = 16,
) -> tuple[ObjectSendStream[LocationEvent], ObjectReceiveStream[LocationEvent]]:
    """Create a send/receive pair for location events."""
    return anyio.create_memory_object_stream[LocationEvent](max_buffer_size)


async def follow(router: Router, receive: ObjectReceiveStream[LocationEvent]) -> int:
    """Replace-navigate *router* to every location received.

    Returns the number of locations applied once the stream closes.
    Stops early, without error, if the router is closed.
    """
    applied = 0
    async with receive:
        async for event in receive:
            if router.closed:
                logger.debug("Router closed; no longer following location events")
                break
            router.navigate(str(event), replace=True)
            applied += 1
    return applied
