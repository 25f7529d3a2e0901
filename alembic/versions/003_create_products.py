"""003: create products table

Revision ID: 003
Revises: 002
Create Date: 2026-10-01
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE products (
            id                   UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            name                 VARCHAR(200)    NOT NULL,
            vendor_id            UUID            NOT NULL REFERENCES users(id),
            price_cents          BIGINT          NOT NULL,
            negotiable           BOOLEAN         NOT NULL DEFAULT TRUE,
            min_offer_ratio_bps  SMALLINT,
            is_active            BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at           TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at           TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_products_price       CHECK (price_cents >= 0),
            CONSTRAINT ck_products_min_ratio   CHECK (
                min_offer_ratio_bps IS NULL
                OR (min_offer_ratio_bps > 0 AND min_offer_ratio_bps <= 10000)
            )
        );
    """)
    op.execute("CREATE INDEX idx_products_vendor ON products (vendor_id);")
    op.execute("""
        CREATE TRIGGER trg_products_updated_at
            BEFORE UPDATE ON products
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON COLUMN products.min_offer_ratio_bps IS 'NULL means platform default 9000';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS products CASCADE;")
