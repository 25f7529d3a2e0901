"""ClientEventDispatcher — routes validated client frames to room operations.

Relayed chat, offer and bid frames are broadcast only; nothing is
persisted here. Durable messages and offers go through the HTTP API.
"""

import logging
from typing import Any

from pydantic import BaseModel, ValidationError
from starlette.websockets import WebSocket

from src.sh_common.id_generator import generate_id
from src.sh_realtime.application.frames import (
    ChatFrame,
    OfferUpdateFrame,
    PlaceBidFrame,
    ProductRoomFrame,
)
from src.sh_realtime.hub import RealtimeHub
from src.sh_realtime.registry import product_room

logger = logging.getLogger("sh.realtime")

FRAME_MODELS: dict[str, type[BaseModel]] = {
    "join_product_room": ProductRoomFrame,
    "leave_product_room": ProductRoomFrame,
    "send_message": ChatFrame,
    "offer_update": OfferUpdateFrame,
    "typing_start": ProductRoomFrame,
    "typing_stop": ProductRoomFrame,
    "place_bid": PlaceBidFrame,
}


def error_frame(message: str, details: Any = None) -> dict[str, Any]:
    data: dict[str, Any] = {"message": message}
    if details is not None:
        data["details"] = details
    return {"event": "error", "data": data}


class ClientEventDispatcher:
    def __init__(self, hub: RealtimeHub, user_id: str, user_name: str) -> None:
        self._hub = hub
        self._user_id = user_id
        self._user_name = user_name

    async def dispatch(self, websocket: WebSocket, frame: Any) -> None:
        if not isinstance(frame, dict) or "type" not in frame:
            await websocket.send_json(
                error_frame("Message must be a JSON object with a 'type' field")
            )
            return

        event = frame["type"]
        model = FRAME_MODELS.get(event)
        if model is None:
            await websocket.send_json(error_frame(f"Unknown event type: {event}"))
            return
        try:
            payload = model.model_validate(frame.get("data") or {})
        except ValidationError as exc:
            await websocket.send_json(
                error_frame("Invalid payload", exc.errors(include_url=False))
            )
            return

        handler = getattr(self, f"_on_{event}")
        await handler(websocket, payload)

    async def _on_join_product_room(self, websocket: WebSocket, p: ProductRoomFrame) -> None:
        self._hub.registry.join(websocket, product_room(p.product_id))
        logger.debug("User %s joined product room %s", self._user_id, p.product_id)
        await websocket.send_json(
            {"event": "joined_product_room", "data": {"product_id": p.product_id}}
        )

    async def _on_leave_product_room(self, websocket: WebSocket, p: ProductRoomFrame) -> None:
        self._hub.registry.leave(websocket, product_room(p.product_id))
        logger.debug("User %s left product room %s", self._user_id, p.product_id)

    async def _on_send_message(self, websocket: WebSocket, p: ChatFrame) -> None:
        await self._hub.publish(
            product_room(p.product_id),
            "new_message",
            {
                "id": generate_id(),
                "product_id": p.product_id,
                "sender_id": self._user_id,
                "sender_name": self._user_name,
                "message": p.message,
                "type": p.type,
                "amount_cents": p.amount_cents,
            },
        )

    async def _on_offer_update(self, websocket: WebSocket, p: OfferUpdateFrame) -> None:
        await self._hub.publish(
            product_room(p.product_id),
            "offer_updated",
            {
                "offer_id": p.offer_id,
                "status": p.status,
                "message": p.message,
                "updated_by": self._user_id,
                "updated_by_name": self._user_name,
            },
        )

    async def _on_typing_start(self, websocket: WebSocket, p: ProductRoomFrame) -> None:
        await self._typing(p.product_id, True)

    async def _on_typing_stop(self, websocket: WebSocket, p: ProductRoomFrame) -> None:
        await self._typing(p.product_id, False)

    async def _typing(self, product_id: str, is_typing: bool) -> None:
        await self._hub.publish(
            product_room(product_id),
            "user_typing",
            {"user_id": self._user_id, "user_name": self._user_name, "is_typing": is_typing},
            exclude_user=self._user_id,
        )

    async def _on_place_bid(self, websocket: WebSocket, p: PlaceBidFrame) -> None:
        await self._hub.publish(
            product_room(p.product_id),
            "new_bid",
            {
                "bid_id": generate_id(),
                "product_id": p.product_id,
                "bid_amount_cents": p.bid_amount_cents,
                "bidder_id": self._user_id,
                "bidder_name": p.bidder_name or self._user_name,
            },
        )
