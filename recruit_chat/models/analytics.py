"""Token validation failure log."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from database import Base, utcnow


class TokenAnalytics(Base):
    __tablename__ = "token_analytics"

    id: Mapped[int] = mapped_column(primary_key=True)
    failure_reason: Mapped[str] = mapped_column(String(50), index=True)
    token_string: Mapped[str | None] = mapped_column(String(500), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    access_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    full_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    metadata_: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    def __repr__(self):
        return f"<TokenAnalytics {self.failure_reason} at {self.created_at}>"
