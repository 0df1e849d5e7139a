"""Conversation model: one row per successful chat exchange."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base, utcnow

if TYPE_CHECKING:
    from models.token import ChatSession, Token


class Conversation(Base):
    __tablename__ = "conversations"

    id: Mapped[int] = mapped_column(primary_key=True)
    token_id: Mapped[int] = mapped_column(ForeignKey("tokens.id", ondelete="CASCADE"), index=True)
    session_id: Mapped[int | None] = mapped_column(
        ForeignKey("sessions.id", ondelete="SET NULL"), nullable=True, index=True
    )
    message: Mapped[str] = mapped_column(Text)
    response: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    token: Mapped[Token] = relationship("Token", back_populates="conversations")
    session: Mapped[ChatSession | None] = relationship("ChatSession", back_populates="conversations")

    def __repr__(self):
        return f"<Conversation {self.id} token_id={self.token_id}>"
