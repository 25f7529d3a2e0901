"""Domain events for sh_negotiation.

Published after the owning transaction commits. Delivery is best effort:
the relay may drop events, clients re-read state over HTTP.
"""

from typing import Any, Protocol

OFFER_CREATED = "offer_created"
OFFER_UPDATED = "offer_updated"
NEW_MESSAGE = "new_message"


class NegotiationNotifier(Protocol):
    async def notify_user(self, user_id: str, event: str, data: dict[str, Any]) -> None: ...

    async def notify_product_room(
        self, product_id: str, event: str, data: dict[str, Any]
    ) -> None: ...
