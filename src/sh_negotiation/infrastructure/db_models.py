"""SQLAlchemy ORM models for chat_messages / negotiation_moderations.

DDL reference only — queries use raw SQL. Alembic migrations
(006_create_chat_messages.py, 007_create_negotiation_moderations.py) are authoritative.
"""
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from src.sh_common.database import Base


class ChatMessageORM(Base):
    __tablename__ = "chat_messages"

    id: Mapped[str] = mapped_column(String(20), primary_key=True)
    product_id: Mapped[str] = mapped_column(String(64), nullable=False)
    buyer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    seller_id: Mapped[str] = mapped_column(String(64), nullable=False)
    sender_id: Mapped[str] = mapped_column(String(64), nullable=False)
    type: Mapped[str] = mapped_column(String(10), nullable=False, default="text")
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="none")
    amount_cents: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class NegotiationModerationORM(Base):
    __tablename__ = "negotiation_moderations"

    id: Mapped[str] = mapped_column(String(20), primary_key=True)
    negotiation_id: Mapped[str] = mapped_column(
        String(20), ForeignKey("chat_messages.id"), nullable=False
    )
    action: Mapped[str] = mapped_column(String(10), nullable=False)
    reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    moderated_by: Mapped[str] = mapped_column(String(64), nullable=False)
    moderated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
