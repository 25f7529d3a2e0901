"""RealtimeHub — Redis pub/sub fan-out to locally connected sockets.

Every process publishes to one channel and every process listens on it,
delivering each event to the sockets it holds for the target room. The
relay is best effort: a failed publish is logged and dropped, and state
always comes from the HTTP API. If Redis drops the subscription the
listener logs it and resubscribes with exponential backoff.

Wire format on the channel:
    {"room": "product_42", "event": "offer_created", "data": {...},
     "timestamp": "...", "exclude_user": null}
"""

import asyncio
import contextlib
import json
import logging
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from starlette.websockets import WebSocket, WebSocketDisconnect

from config.settings import settings
from src.sh_common.datetime_utils import utc_now
from src.sh_realtime.registry import ConnectionRegistry, product_room, user_room

logger = logging.getLogger("sh.realtime")

MAX_RETRY_DELAY_S = 30.0


class RealtimeHub:
    def __init__(
        self,
        redis: aioredis.Redis,
        registry: ConnectionRegistry | None = None,
        channel: str | None = None,
        retry_delay: float = 1.0,
    ) -> None:
        self._redis = redis
        self.registry = registry or ConnectionRegistry()
        self._channel = channel or settings.REALTIME_CHANNEL
        self._pubsub: Any = None
        self._retry_delay = retry_delay
        self._listener: asyncio.Task[None] | None = None

    async def start(self) -> None:
        self._pubsub = self._redis.pubsub()
        await self._pubsub.subscribe(self._channel)
        self._listener = asyncio.create_task(self._listen(), name="realtime-listener")
        self._listener.add_done_callback(self._on_listener_done)
        logger.info("Realtime hub listening on %s", self._channel)

    async def stop(self) -> None:
        if self._listener is not None:
            self._listener.cancel()
            try:
                await self._listener
            except asyncio.CancelledError:
                pass
            except Exception as exc:
                # already logged by _on_listener_done
                logger.debug("Realtime listener exited with %r", exc)
            self._listener = None
        if self._pubsub is not None:
            try:
                await self._pubsub.unsubscribe(self._channel)
                await self._pubsub.aclose()
            except RedisError as exc:
                logger.warning("Realtime pubsub close failed: %s", exc)
            self._pubsub = None
        logger.info("Realtime hub stopped")

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    async def publish(
        self,
        room: str,
        event: str,
        data: dict[str, Any],
        exclude_user: str | None = None,
    ) -> None:
        envelope = {
            "room": room,
            "event": event,
            "data": data,
            "timestamp": utc_now().isoformat(),
            "exclude_user": exclude_user,
        }
        try:
            await self._redis.publish(self._channel, json.dumps(envelope, default=str))
        except RedisError as exc:
            logger.warning("Dropped realtime event %s for %s: %s", event, room, exc)

    async def notify_user(self, user_id: str, event: str, data: dict[str, Any]) -> None:
        await self.publish(user_room(user_id), event, data)

    async def notify_product_room(
        self, product_id: str, event: str, data: dict[str, Any]
    ) -> None:
        await self.publish(product_room(product_id), event, data)

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    async def deliver(self, envelope: dict[str, Any]) -> int:
        """Send one event to the local members of its room; return the delivered count."""
        room = envelope.get("room")
        if not room:
            return 0
        exclude = envelope.get("exclude_user")
        frame = {
            "event": envelope.get("event"),
            "data": {**(envelope.get("data") or {}), "timestamp": envelope.get("timestamp")},
        }
        delivered = 0
        for websocket in self.registry.members(room):
            if exclude is not None and self.registry.owner(websocket) == exclude:
                continue
            try:
                await websocket.send_json(frame)
                delivered += 1
            except (WebSocketDisconnect, RuntimeError):
                # socket closed between lookup and send
                self.registry.remove(websocket)
            except Exception:
                logger.exception("Realtime send failed; dropping socket")
                self.registry.remove(websocket)
        return delivered

    async def _listen(self) -> None:
        delay = self._retry_delay
        subscribed = True
        while True:
            try:
                if not subscribed:
                    await self._resubscribe()
                    subscribed = True
                    logger.info("Realtime hub resubscribed to %s", self._channel)
                async for message in self._pubsub.listen():
                    delay = self._retry_delay
                    await self._handle_message(message)
                return
            except RedisError as exc:
                subscribed = False
                logger.warning(
                    "Realtime listener lost Redis: %s; retrying in %.1fs", exc, delay
                )
            await asyncio.sleep(delay)
            delay = min(delay * 2, MAX_RETRY_DELAY_S)

    async def _resubscribe(self) -> None:
        stale, self._pubsub = self._pubsub, self._redis.pubsub()
        if stale is not None:
            with contextlib.suppress(RedisError):
                await stale.aclose()
        await self._pubsub.subscribe(self._channel)

    async def _handle_message(self, message: dict[str, Any]) -> None:
        if message.get("type") != "message":
            return
        try:
            envelope = json.loads(message["data"])
        except (TypeError, json.JSONDecodeError):
            logger.warning("Ignoring malformed realtime payload: %r", message.get("data"))
            return
        if not isinstance(envelope, dict):
            logger.warning("Ignoring non-object realtime payload: %r", envelope)
            return
        try:
            await self.deliver(envelope)
        except Exception:
            logger.exception(
                "Realtime delivery failed for %s/%s", envelope.get("room"), envelope.get("event")
            )

    def _on_listener_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Realtime listener stopped: %r", exc, exc_info=exc)
