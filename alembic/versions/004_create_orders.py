"""004: create orders table

Revision ID: 004
Revises: 003
Create Date: 2026-10-01
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id            UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id       UUID            NOT NULL REFERENCES users(id),
            product_id    UUID            REFERENCES products(id),
            total_cents   BIGINT          NOT NULL DEFAULT 0,
            status        VARCHAR(16)     NOT NULL DEFAULT 'pending',
            created_at    TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at    TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_orders_status CHECK (
                status IN ('pending', 'confirmed', 'shipped', 'delivered', 'cancelled')
            ),
            CONSTRAINT ck_orders_total  CHECK (total_cents >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_orders_user_status ON orders (user_id, status);")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
