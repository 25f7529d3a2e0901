"""ProductRepository — raw SQL read access to the products table."""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sh_catalog.domain.models import Product

# Cast to TEXT so malformed ids simply miss instead of raising a UUID cast error.
_GET_PRODUCT_SQL = text("""
    SELECT id, name, vendor_id, price_cents, negotiable, min_offer_ratio_bps
    FROM products
    WHERE CAST(id AS TEXT) = LOWER(:product_id)
""")


def _row_to_product(row: Any) -> Product:
    return Product(
        id=str(row.id),
        name=row.name,
        vendor_id=str(row.vendor_id),
        price_cents=row.price_cents,
        negotiable=row.negotiable,
        min_offer_ratio_bps=row.min_offer_ratio_bps,
    )


class ProductRepository:
    async def get_product(self, db: AsyncSession, product_id: str) -> Product | None:
        result = await db.execute(_GET_PRODUCT_SQL, {"product_id": product_id})
        row = result.fetchone()
        return _row_to_product(row) if row else None
