"""WebSocket endpoint for the realtime relay.

    ws://host/ws?token=<access token>

The token is checked once at connect time; a missing or invalid token
closes the socket with code 4401.
"""

import json
import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from src.sh_common.database import async_session_factory
from src.sh_common.errors import AccountDisabledError, InvalidCredentialsError
from src.sh_gateway.auth.dependencies import load_user_for_token
from src.sh_realtime.application.dispatcher import ClientEventDispatcher, error_frame

logger = logging.getLogger("sh.realtime")

router = APIRouter(tags=["realtime"])

UNAUTHORIZED_CLOSE_CODE = 4401
UNAVAILABLE_CLOSE_CODE = 1013


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket, token: str | None = Query(None)) -> None:
    hub = getattr(websocket.app.state, "realtime_hub", None)
    await websocket.accept()
    if hub is None:
        await websocket.close(code=UNAVAILABLE_CLOSE_CODE)
        return
    if not token:
        await websocket.close(code=UNAUTHORIZED_CLOSE_CODE, reason="No token provided")
        return

    try:
        async with async_session_factory() as db:
            user = await load_user_for_token(token, db)
    except (InvalidCredentialsError, AccountDisabledError) as exc:
        await websocket.close(code=UNAUTHORIZED_CLOSE_CODE, reason=exc.message)
        return

    user_id = str(user.id)
    hub.registry.add(user_id, websocket)
    dispatcher = ClientEventDispatcher(hub, user_id, user.name)
    logger.info("User %s connected", user_id)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
            except json.JSONDecodeError:
                await websocket.send_json(error_frame("Invalid JSON"))
                continue
            await dispatcher.dispatch(websocket, frame)
    except WebSocketDisconnect:
        pass
    finally:
        hub.registry.remove(websocket)
        logger.info("User %s disconnected", user_id)
