"""Topic-based publish/subscribe over websocket connections."""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Iterator, NamedTuple

from aiohttp import WSMsgType

logger = logging.getLogger(__name__)


class Cache:
    """A thread-safe key/value store."""

    def __init__(self) -> None:
        self._items: dict[Any, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: Any) -> Any:
        """Return the value stored under ``key``, or None if there is none."""
        with self._lock:
            return self._items.get(key)

    def set(self, key: Any, value: Any) -> None:
        """Store ``value`` under ``key``."""
        with self._lock:
            self._items[key] = value

    def delete(self, key: Any) -> None:
        """Remove ``key`` if it is present."""
        with self._lock:
            self._items.pop(key, None)

    def items(self) -> list[tuple[Any, Any]]:
        """Return a snapshot of the stored key/value pairs."""
        with self._lock:
            return list(self._items.items())

    def close(self) -> None:
        """Drop every stored item."""
        with self._lock:
            self._items = {}

    def __contains__(self, key: Any) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter([key for key, _ in self.items()])


class Event(NamedTuple):
    """An incoming client event: ``{"event": ..., "channel": ..., "data": ...}``."""

    event: str
    channel: str
    data: str


def parse_event(message: str | bytes) -> Event:
    """Extract the event, channel and data strings from a JSON message.

    Missing, non-string or unparsable fields come back as empty strings.
    """
    if isinstance(message, (bytes, bytearray)):
        message = bytes(message).decode("utf-8", "replace")
    try:
        document = json.loads(message)
    except ValueError:
        document = None
    if not isinstance(document, dict):
        return Event("", "", "")

    def text(name: str) -> str:
        value = document.get(name)
        return value if isinstance(value, str) else ""

    return Event(text("event"), text("channel"), text("data"))


async def _send(conn: Any, payload: str | bytes) -> None:
    if isinstance(payload, (bytes, bytearray)):
        await conn.send_bytes(bytes(payload))
    else:
        await conn.send_str(payload)


class Hub:
    """Keeps the subscribers of each topic and relays messages between them."""

    def __init__(self, cache: Cache | None = None) -> None:
        self.cache = cache if cache is not None else Cache()

    def subscribe(self, topic: str, client: Any) -> None:
        """Add ``client`` to the subscribers of ``topic``."""
        clients = self.cache.get(topic)
        if clients is None:
            clients = set()
        clients.add(client)
        self.cache.set(topic, clients)

    def unsubscribe(self, topic: str, client: Any) -> None:
        """Remove ``client`` from the subscribers of ``topic``."""
        clients = self.cache.get(topic)
        if clients is None:
            return
        clients.discard(client)
        self.cache.set(topic, clients)

    async def publish(self, conn: Any, topic: str, data: str | bytes) -> None:
        """Send ``data`` to every subscriber of ``topic``.

        The sender must itself be subscribed; otherwise it is told so and
        nothing is relayed.
        """
        clients = self.cache.get(topic)
        if clients is None:
            logger.info("no client to send data")
            return
        if conn not in clients:
            await _send(conn, f"should subscribe in '{topic}' channel first")
            logger.warning("spam message")
            return
        for client in list(clients):
            try:
                await _send(client, data)
            except (OSError, RuntimeError) as exc:
                logger.warning("sending to subscriber failed: %s", exc)

    async def serve_messages(self, conn: Any) -> None:
        """Handle the events sent over one websocket until it closes.

        Events are ``message``, ``subscribe`` and ``unsubscribe``; each
        incoming message is answered with an acknowledgement or its echo.
        """
        try:
            async for message in conn:
                if message.type not in (WSMsgType.TEXT, WSMsgType.BINARY):
                    logger.info("websocket reading stopped: %s", message.type)
                    break
                raw = message.data
                event = parse_event(raw)
                reply: str | bytes = raw
                if event.event == "message":
                    await self.publish(conn, event.channel, event.data)
                elif event.event == "subscribe":
                    self.subscribe(event.channel, conn)
                    reply = f"subscribe to {event.channel} success!"
                elif event.event == "unsubscribe":
                    self.unsubscribe(event.channel, conn)
                    reply = f"unsubscribe from {event.channel} success!"
                logger.debug("%s", reply)
                try:
                    await _send(conn, reply)
                except (OSError, RuntimeError) as exc:
                    logger.warning("reply failed: %s", exc)
        finally:
            for topic, clients in self.cache.items():
                if conn in clients:
                    self.unsubscribe(topic, conn)
            await conn.close()