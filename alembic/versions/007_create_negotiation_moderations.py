"""007: create negotiation_moderations table (append-only admin audit)

Revision ID: 007
Revises: 006
Create Date: 2026-10-01
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE negotiation_moderations (
            id              VARCHAR(20)     PRIMARY KEY,
            negotiation_id  VARCHAR(20)     NOT NULL REFERENCES chat_messages(id),
            action          VARCHAR(10)     NOT NULL,
            reason          VARCHAR(500),
            moderated_by    VARCHAR(64)     NOT NULL,
            moderated_at    TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_moderation_action CHECK (action IN ('approve', 'reject'))
        );
    """)
    op.execute(
        "CREATE INDEX idx_moderations_negotiation "
        "ON negotiation_moderations (negotiation_id, moderated_at);"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS negotiation_moderations CASCADE;")
