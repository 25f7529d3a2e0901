"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool (created at import time) remains valid across
the entire test session. Tests seed their own users and products and skip
when no migrated database is reachable.
"""

import uuid
from collections.abc import Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.main import app
from src.sh_common.database import engine
from src.sh_gateway.auth.jwt_handler import create_access_token


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1 FROM chat_messages LIMIT 1"))
    except Exception as exc:  # noqa: BLE001
        pytest.skip(f"migrated database unavailable: {exc}")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def seed_user(client: AsyncClient) -> Callable[..., Awaitable[tuple[str, dict[str, str]]]]:
    """Insert a user and return (user_id, auth headers)."""

    async def _seed(
        role: str = "customer",
        loyalty_points: int = 0,
        payment_verified: bool = True,
        delivered_orders: int = 0,
    ) -> tuple[str, dict[str, str]]:
        uid = uuid.uuid4().hex[:8]
        async with engine.begin() as conn:
            user_id = (
                await conn.execute(
                    text("""
                        INSERT INTO users (name, email, role, loyalty_points, payment_verified)
                        VALUES (:name, :email, :role, :points, :verified)
                        RETURNING id
                    """),
                    {
                        "name": f"user_{uid}",
                        "email": f"user_{uid}@example.com",
                        "role": role,
                        "points": loyalty_points,
                        "verified": payment_verified,
                    },
                )
            ).scalar_one()
            for _ in range(delivered_orders):
                await conn.execute(
                    text("INSERT INTO orders (user_id, status) VALUES (:uid, 'delivered')"),
                    {"uid": user_id},
                )
        token = create_access_token(str(user_id))
        return str(user_id), {"Authorization": f"Bearer {token}"}

    return _seed


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def seed_product(client: AsyncClient) -> Callable[..., Awaitable[str]]:
    async def _seed(
        vendor_id: str, price_cents: int = 300000, negotiable: bool = True
    ) -> str:
        async with engine.begin() as conn:
            product_id = (
                await conn.execute(
                    text("""
                        INSERT INTO products (name, vendor_id, price_cents, negotiable)
                        VALUES ('Handloom saree', :vendor_id, :price, :negotiable)
                        RETURNING id
                    """),
                    {"vendor_id": vendor_id, "price": price_cents, "negotiable": negotiable},
                )
            ).scalar_one()
        return str(product_id)

    return _seed
