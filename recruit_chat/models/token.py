"""Access token and browser session models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base, utcnow

if TYPE_CHECKING:
    from models.conversation import Conversation


def new_token_string() -> str:
    """Canonical token format: a full random UUID4 string."""
    return str(uuid.uuid4())


class Token(Base):
    __tablename__ = "tokens"

    id: Mapped[int] = mapped_column(primary_key=True)
    token: Mapped[str] = mapped_column(String(64), unique=True, index=True, default=new_token_string)
    label: Mapped[str] = mapped_column(String(255))
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    max_messages: Mapped[int] = mapped_column(Integer, default=30)
    used_messages: Mapped[int] = mapped_column(Integer, default=0)
    expires_at: Mapped[datetime] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    sessions: Mapped[list[ChatSession]] = relationship(
        "ChatSession",
        back_populates="token",
        order_by="ChatSession.created_at.desc()",
    )
    conversations: Mapped[list[Conversation]] = relationship(
        "Conversation",
        back_populates="token",
        order_by="Conversation.created_at",
    )

    @property
    def remaining_messages(self) -> int:
        return max(self.max_messages - self.used_messages, 0)

    def __repr__(self):
        return f"<Token {self.label} ({self.used_messages}/{self.max_messages})>"


class ChatSession(Base):
    """One browser visit's correlation id. Immutable once created."""

    __tablename__ = "sessions"

    id: Mapped[int] = mapped_column(primary_key=True)
    session_id: Mapped[str] = mapped_column(
        String(36), unique=True, index=True, default=lambda: str(uuid.uuid4())
    )
    token_id: Mapped[int] = mapped_column(ForeignKey("tokens.id", ondelete="CASCADE"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    token: Mapped[Token] = relationship("Token", back_populates="sessions")
    conversations: Mapped[list[Conversation]] = relationship(
        "Conversation",
        back_populates="session",
        order_by="Conversation.created_at",
    )

    def __repr__(self):
        return f"<ChatSession {self.session_id} token_id={self.token_id}>"
