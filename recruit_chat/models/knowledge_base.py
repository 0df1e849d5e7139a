"""Knowledge base singleton model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Text
from sqlalchemy.orm import Mapped, Session, mapped_column

from database import Base, utcnow


class KnowledgeBase(Base):
    __tablename__ = "knowledge_base"

    id: Mapped[int] = mapped_column(primary_key=True)
    content: Mapped[str] = mapped_column(Text, default="")
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    @classmethod
    def current(cls, db: Session) -> KnowledgeBase | None:
        return db.query(cls).order_by(cls.id).first()

    @classmethod
    def replace(cls, db: Session, content: str) -> KnowledgeBase:
        obj = cls.current(db)
        if obj is None:
            obj = cls(content=content)
            db.add(obj)
        else:
            obj.content = content
        db.commit()
        db.refresh(obj)
        return obj
