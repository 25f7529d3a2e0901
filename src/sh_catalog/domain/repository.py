"""Product catalog Protocol — the negotiation service only needs point reads."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sh_catalog.domain.models import Product


class ProductRepositoryProtocol(Protocol):
    async def get_product(self, db: AsyncSession, product_id: str) -> Product | None: ...
