"""005: create repayments table

Revision ID: 005
Revises: 004
Create Date: 2026-10-01
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE repayments (
            id            UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            borrower_id   UUID            NOT NULL REFERENCES users(id),
            order_id      UUID            REFERENCES orders(id),
            amount_cents  BIGINT          NOT NULL,
            status        VARCHAR(16)     NOT NULL DEFAULT 'scheduled',
            due_date      DATE,
            created_at    TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at    TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_repayments_status CHECK (status IN ('scheduled', 'paid', 'failed')),
            CONSTRAINT ck_repayments_amount CHECK (amount_cents > 0)
        );
    """)
    op.execute(
        "CREATE INDEX idx_repayments_borrower_status "
        "ON repayments (borrower_id, status, updated_at);"
    )
    op.execute("""
        CREATE TRIGGER trg_repayments_updated_at
            BEFORE UPDATE ON repayments
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS repayments CASCADE;")
