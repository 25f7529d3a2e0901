"""HTTP-level tests for the negotiation, chat and admin routers.

Auth, session and service dependencies are overridden; no database needed.
"""

from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from src.main import app
from src.sh_common.database import get_db_session
from src.sh_common.errors import NegotiationForbiddenError, OfferTooLowError
from src.sh_gateway.auth.dependencies import get_current_actor
from src.sh_negotiation.api.dependencies import get_negotiation_service
from src.sh_negotiation.application.schemas import (
    NegotiationListResponse,
    NegotiationResponse,
    PaginationResponse,
)
from src.sh_negotiation.domain.models import Actor, Negotiation

BUYER = Actor(id="buyer-1", role="customer")
VENDOR = Actor(id="vendor-1", role="vendor")
ADMIN = Actor(id="admin-1", role="admin")

ActorSwitch = Callable[[Actor], None]


def _offer_response(status: str = "pending") -> NegotiationResponse:
    return NegotiationResponse.from_domain(
        Negotiation(
            id="neg-1", product_id="prod-1", buyer_id=BUYER.id, seller_id=VENDOR.id,
            sender_id=BUYER.id, type="offer", status=status, amount_cents=250000,
            message="Offer: ₹2,500.00", created_at=datetime(2026, 10, 1, tzinfo=UTC),
        )
    )


@pytest.fixture
def service() -> MagicMock:
    return MagicMock(
        submit_offer=AsyncMock(return_value=_offer_response()),
        transition=AsyncMock(return_value=_offer_response("accepted")),
        update_status=AsyncMock(return_value=_offer_response("rejected")),
        get_negotiation=AsyncMock(return_value=_offer_response()),
        list_negotiations=AsyncMock(
            return_value=NegotiationListResponse(
                negotiations=[_offer_response()],
                pagination=PaginationResponse.build(1, 20, 1, 1),
            )
        ),
        list_conversation=AsyncMock(return_value=[]),
    )


@pytest.fixture
def as_actor(service: MagicMock) -> Iterator[ActorSwitch]:
    def _use(actor: Actor) -> None:
        app.dependency_overrides[get_current_actor] = lambda: actor

    app.dependency_overrides[get_db_session] = lambda: MagicMock()
    app.dependency_overrides[get_negotiation_service] = lambda: service
    _use(BUYER)
    yield _use
    app.dependency_overrides.clear()


class TestNegotiationRoutes:
    async def test_submit_offer_created(
        self, client: AsyncClient, service: MagicMock, as_actor: ActorSwitch
    ) -> None:
        resp = await client.post(
            "/api/v1/negotiations",
            json={"product_id": "prod-1", "proposed_price_cents": 250000},
            headers={"X-Request-ID": "req_test123"},
        )

        assert resp.status_code == 201
        body = resp.json()
        assert body["code"] == 0
        assert body["data"]["status"] == "pending"
        assert body["request_id"] == "req_test123"
        assert resp.headers["X-Request-ID"] == "req_test123"
        args = service.submit_offer.call_args.args
        assert args[1] == BUYER
        assert args[2:] == ("prod-1", 250000, None)

    async def test_offer_too_low_envelope(
        self, client: AsyncClient, service: MagicMock, as_actor: ActorSwitch
    ) -> None:
        service.submit_offer.side_effect = OfferTooLowError(200000, 250000)

        resp = await client.post(
            "/api/v1/negotiations",
            json={"product_id": "prod-1", "proposed_price_cents": 200000},
        )

        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == 4001
        assert body["data"]["min_allowed_cents"] == 250000

    async def test_non_positive_amount_is_validation_error(
        self, client: AsyncClient, service: MagicMock, as_actor: ActorSwitch
    ) -> None:
        resp = await client.post(
            "/api/v1/negotiations",
            json={"product_id": "prod-1", "proposed_price_cents": 0},
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == 9003
        service.submit_offer.assert_not_awaited()

    async def test_message_too_long_rejected(
        self, client: AsyncClient, as_actor: ActorSwitch
    ) -> None:
        resp = await client.post(
            "/api/v1/negotiations",
            json={"product_id": "prod-1", "proposed_price_cents": 1, "message": "x" * 501},
        )
        assert resp.status_code == 400

    async def test_list_with_filters(
        self, client: AsyncClient, service: MagicMock, as_actor: ActorSwitch
    ) -> None:
        resp = await client.get("/api/v1/negotiations?status=completed&page=2&limit=5")
        assert resp.status_code == 200
        assert resp.json()["data"]["pagination"]["total_count"] == 1
        assert service.list_negotiations.call_args.args[2:] == ("completed", 2, 5)

    @pytest.mark.parametrize("query", ["limit=51", "limit=0", "page=0", "status=open"])
    async def test_list_rejects_bad_query(
        self, client: AsyncClient, as_actor: ActorSwitch, query: str
    ) -> None:
        resp = await client.get(f"/api/v1/negotiations?{query}")
        assert resp.status_code == 400

    async def test_get_forbidden(
        self, client: AsyncClient, service: MagicMock, as_actor: ActorSwitch
    ) -> None:
        service.get_negotiation.side_effect = NegotiationForbiddenError("neg-1")
        resp = await client.get("/api/v1/negotiations/neg-1")
        assert resp.status_code == 403
        assert resp.json()["code"] == 4005

    async def test_update_status(
        self, client: AsyncClient, service: MagicMock, as_actor: ActorSwitch
    ) -> None:
        as_actor(VENDOR)
        resp = await client.put("/api/v1/negotiations/neg-1/status", json={"status": "rejected"})
        assert resp.status_code == 200
        assert service.update_status.call_args.args[1:] == (VENDOR, "neg-1", "rejected")

    async def test_update_status_unknown_value(
        self, client: AsyncClient, as_actor: ActorSwitch
    ) -> None:
        resp = await client.put("/api/v1/negotiations/neg-1/status", json={"status": "done"})
        assert resp.status_code == 400
        assert resp.json()["code"] == 9003


class TestChatRoutes:
    async def test_send_offer_alias(
        self, client: AsyncClient, service: MagicMock, as_actor: ActorSwitch
    ) -> None:
        resp = await client.post(
            "/api/v1/chat/send-offer", json={"product_id": "prod-1", "amount_cents": 260000}
        )
        assert resp.status_code == 201
        assert service.submit_offer.call_args.args[2:] == ("prod-1", 260000)

    async def test_accept_and_reject(
        self, client: AsyncClient, service: MagicMock, as_actor: ActorSwitch
    ) -> None:
        as_actor(VENDOR)
        assert (await client.post("/api/v1/chat/accept-offer/neg-1")).status_code == 200
        assert service.transition.call_args.args[2:] == ("neg-1", "accept")
        assert (await client.post("/api/v1/chat/reject-offer/neg-1")).status_code == 200
        assert service.transition.call_args.args[2:] == ("neg-1", "reject")

    async def test_blank_message_rejected(
        self, client: AsyncClient, as_actor: ActorSwitch
    ) -> None:
        resp = await client.post("/api/v1/chat/send", json={"product_id": "prod-1", "message": "   "})
        assert resp.status_code == 400

    async def test_messages(
        self, client: AsyncClient, service: MagicMock, as_actor: ActorSwitch
    ) -> None:
        resp = await client.get("/api/v1/chat/messages/prod-1")
        assert resp.status_code == 200
        assert resp.json()["data"] == []


class TestAdminRoutes:
    async def test_non_admin_forbidden(
        self, client: AsyncClient, as_actor: ActorSwitch
    ) -> None:
        as_actor(VENDOR)
        resp = await client.get("/api/v1/admin/negotiations")
        assert resp.status_code == 403
        assert resp.json()["code"] == 1006

    async def test_admin_limit_up_to_100(
        self, client: AsyncClient, as_actor: ActorSwitch
    ) -> None:
        as_actor(ADMIN)
        repo_page = NegotiationListResponse(
            negotiations=[], pagination=PaginationResponse.build(1, 100, 0, 0)
        )
        app.dependency_overrides[get_negotiation_service] = lambda: MagicMock(
            list_offers=AsyncMock(return_value=repo_page)
        )
        assert (await client.get("/api/v1/admin/negotiations?limit=100")).status_code == 200
        assert (await client.get("/api/v1/admin/negotiations?limit=101")).status_code == 400

    async def test_moderate_bad_action(
        self, client: AsyncClient, as_actor: ActorSwitch
    ) -> None:
        as_actor(ADMIN)
        resp = await client.put(
            "/api/v1/admin/negotiations/neg-1/moderate", json={"action": "delete"}
        )
        assert resp.status_code == 400


class TestAuth:
    async def test_missing_token_is_401(self, client: AsyncClient) -> None:
        app.dependency_overrides[get_db_session] = lambda: MagicMock()
        try:
            resp = await client.get("/api/v1/negotiations")
        finally:
            app.dependency_overrides.clear()
        assert resp.status_code == 401

    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
