"""ConnectionRegistry — per-process bookkeeping of live WebSocket connections.

Each socket belongs to exactly one user and is always a member of that
user's personal room; product rooms are joined and left on request.
Nothing here survives a restart; clients reconnect and re-join.
"""

from collections import defaultdict

from starlette.websockets import WebSocket


def user_room(user_id: str) -> str:
    return f"user_{user_id}"


def product_room(product_id: str) -> str:
    return f"product_{product_id}"


class ConnectionRegistry:
    def __init__(self) -> None:
        self._by_user: dict[str, set[WebSocket]] = defaultdict(set)
        self._rooms: dict[str, set[WebSocket]] = defaultdict(set)
        self._owner: dict[WebSocket, str] = {}
        self._memberships: dict[WebSocket, set[str]] = defaultdict(set)

    def add(self, user_id: str, websocket: WebSocket) -> None:
        self._owner[websocket] = user_id
        self._by_user[user_id].add(websocket)
        self.join(websocket, user_room(user_id))

    def remove(self, websocket: WebSocket) -> None:
        """Drop a socket from every room. Unknown sockets are ignored."""
        user_id = self._owner.pop(websocket, None)
        for room in self._memberships.pop(websocket, set()):
            members = self._rooms.get(room)
            if members is not None:
                members.discard(websocket)
                if not members:
                    del self._rooms[room]
        if user_id is not None:
            sockets = self._by_user.get(user_id)
            if sockets is not None:
                sockets.discard(websocket)
                if not sockets:
                    del self._by_user[user_id]

    def join(self, websocket: WebSocket, room: str) -> None:
        self._rooms[room].add(websocket)
        self._memberships[websocket].add(room)

    def leave(self, websocket: WebSocket, room: str) -> None:
        members = self._rooms.get(room)
        if members is not None:
            members.discard(websocket)
            if not members:
                del self._rooms[room]
        self._memberships.get(websocket, set()).discard(room)

    def members(self, room: str) -> list[WebSocket]:
        return list(self._rooms.get(room, ()))

    def owner(self, websocket: WebSocket) -> str | None:
        return self._owner.get(websocket)

    def is_online(self, user_id: str) -> bool:
        return bool(self._by_user.get(user_id))

    def online_users(self) -> list[str]:
        return list(self._by_user)
