"""006: create chat_messages table (text messages and offers)

Revision ID: 006
Revises: 005
Create Date: 2026-10-01
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE chat_messages (
            id            VARCHAR(20)     PRIMARY KEY,
            product_id    VARCHAR(64)     NOT NULL,
            buyer_id      VARCHAR(64)     NOT NULL,
            seller_id     VARCHAR(64)     NOT NULL,
            sender_id     VARCHAR(64)     NOT NULL,
            type          VARCHAR(10)     NOT NULL DEFAULT 'text',
            status        VARCHAR(10)     NOT NULL DEFAULT 'none',
            amount_cents  BIGINT,
            message       TEXT,
            created_at    TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at    TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_chat_type    CHECK (type IN ('text', 'offer')),
            CONSTRAINT ck_chat_status  CHECK (status IN ('none', 'pending', 'accepted', 'rejected')),
            CONSTRAINT ck_chat_shape   CHECK (
                (type = 'offer' AND amount_cents > 0 AND status <> 'none')
                OR (type = 'text' AND amount_cents IS NULL AND status = 'none')
            ),
            CONSTRAINT ck_chat_parties CHECK (buyer_id <> seller_id)
        );
    """)
    op.execute("""
        CREATE INDEX idx_chat_conversation
            ON chat_messages (product_id, buyer_id, seller_id, created_at DESC);
    """)
    op.execute("CREATE INDEX idx_chat_buyer ON chat_messages (buyer_id, created_at DESC);")
    op.execute("CREATE INDEX idx_chat_seller ON chat_messages (seller_id, created_at DESC);")
    op.execute("""
        CREATE TRIGGER trg_chat_messages_updated_at
            BEFORE UPDATE ON chat_messages
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE chat_messages IS 'Product chat; type=offer rows are negotiations';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS chat_messages CASCADE;")
