# tests/integration/test_negotiation_flow.py
"""Integration tests for the offer flow: submit → list → decide → moderate.

Requires a running PostgreSQL DB with migrations applied (alembic upgrade head).
"""

from collections.abc import Awaitable, Callable

import pytest
from httpx import AsyncClient

SeedUser = Callable[..., Awaitable[tuple[str, dict[str, str]]]]
SeedProduct = Callable[..., Awaitable[str]]

pytestmark = [pytest.mark.asyncio(loop_scope="session"), pytest.mark.integration]


async def test_loyal_buyer_offer_floor(
    client: AsyncClient, seed_user: SeedUser, seed_product: SeedProduct
) -> None:
    vendor_id, _ = await seed_user(role="vendor")
    _, buyer = await seed_user(loyalty_points=1200)
    product_id = await seed_product(vendor_id)

    low = await client.post(
        "/api/v1/negotiations",
        json={"product_id": product_id, "proposed_price_cents": 240000},
        headers=buyer,
    )
    assert low.status_code == 400
    assert low.json()["data"]["min_allowed_cents"] == 250000

    ok = await client.post(
        "/api/v1/negotiations",
        json={"product_id": product_id, "proposed_price_cents": 250000},
        headers=buyer,
    )
    assert ok.status_code == 201
    assert ok.json()["data"]["status"] == "pending"


async def test_accept_then_second_decision_fails(
    client: AsyncClient, seed_user: SeedUser, seed_product: SeedProduct
) -> None:
    vendor_id, vendor = await seed_user(role="vendor")
    _, buyer = await seed_user()
    product_id = await seed_product(vendor_id)
    created = await client.post(
        "/api/v1/chat/send-offer",
        json={"product_id": product_id, "amount_cents": 290000},
        headers=buyer,
    )
    offer_id = created.json()["data"]["id"]

    forbidden = await client.put(
        f"/api/v1/negotiations/{offer_id}/status", json={"status": "accepted"}, headers=buyer
    )
    assert forbidden.status_code == 403

    accepted = await client.post(f"/api/v1/chat/accept-offer/{offer_id}", headers=vendor)
    assert accepted.status_code == 200
    assert accepted.json()["data"]["status"] == "accepted"

    again = await client.post(f"/api/v1/chat/reject-offer/{offer_id}", headers=vendor)
    assert again.status_code == 400
    assert again.json()["code"] == 4006


async def test_fixed_price_and_self_offer_refused(
    client: AsyncClient, seed_user: SeedUser, seed_product: SeedProduct
) -> None:
    vendor_id, vendor = await seed_user(role="vendor")
    _, buyer = await seed_user(payment_verified=False)
    fixed = await seed_product(vendor_id, negotiable=False)
    open_product = await seed_product(vendor_id)

    resp = await client.post(
        "/api/v1/negotiations",
        json={"product_id": fixed, "proposed_price_cents": 1},
        headers=buyer,
    )
    assert resp.status_code == 403
    assert resp.json()["code"] == 3002

    resp = await client.post(
        "/api/v1/negotiations",
        json={"product_id": open_product, "proposed_price_cents": 290000},
        headers=vendor,
    )
    assert resp.status_code == 403
    assert resp.json()["code"] == 4002


async def test_directory_and_admin_moderation(
    client: AsyncClient, seed_user: SeedUser, seed_product: SeedProduct
) -> None:
    vendor_id, vendor = await seed_user(role="vendor")
    _, buyer = await seed_user()
    _, admin = await seed_user(role="admin")
    product_id = await seed_product(vendor_id)
    for amount in (270000, 280000, 290000):
        await client.post(
            "/api/v1/negotiations",
            json={"product_id": product_id, "proposed_price_cents": amount},
            headers=buyer,
        )

    listing = await client.get("/api/v1/negotiations?page=1&limit=2", headers=vendor)
    data = listing.json()["data"]
    assert data["pagination"]["total_count"] == 3
    assert data["pagination"]["has_next"] is True
    assert data["negotiations"][0]["amount_cents"] == 290000

    offer_id = data["negotiations"][0]["id"]
    moderated = await client.put(
        f"/api/v1/admin/negotiations/{offer_id}/moderate",
        json={"action": "reject", "reason": "Duplicate listing"},
        headers=admin,
    )
    assert moderated.status_code == 200
    assert moderated.json()["data"]["negotiation"]["status"] == "rejected"

    by_vendor = await client.get("/api/v1/admin/negotiations", headers=vendor)
    assert by_vendor.status_code == 403


async def test_chat_conversation(
    client: AsyncClient, seed_user: SeedUser, seed_product: SeedProduct
) -> None:
    vendor_id, vendor = await seed_user(role="vendor")
    buyer_id, buyer = await seed_user()
    product_id = await seed_product(vendor_id)

    sent = await client.post(
        "/api/v1/chat/send", json={"product_id": product_id, "message": "Still available?"},
        headers=buyer,
    )
    assert sent.status_code == 201
    reply = await client.post(
        "/api/v1/chat/send",
        json={"product_id": product_id, "message": "Yes", "recipient_id": buyer_id},
        headers=vendor,
    )
    assert reply.status_code == 201

    stranger_id, _ = await seed_user()
    unsolicited = await client.post(
        "/api/v1/chat/send",
        json={"product_id": product_id, "message": "Hello", "recipient_id": stranger_id},
        headers=vendor,
    )
    assert unsolicited.status_code == 404
    assert unsolicited.json()["code"] == 4008

    history = await client.get(f"/api/v1/chat/messages/{product_id}", headers=buyer)
    messages = [m["message"] for m in history.json()["data"]]
    assert messages == ["Still available?", "Yes"]
