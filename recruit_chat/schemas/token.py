"""Token admin schemas."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import Field, field_validator

from schemas.base import CamelModel


class TokenGenerateIn(CamelModel):
    label: str = Field(min_length=1)
    company: str | None = None
    max_messages: int = Field(default=30, ge=1)
    validity_days: int = Field(default=30, ge=1)

    @field_validator("label")
    @classmethod
    def _label_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Label is required")
        return v.strip()


class TokenGenerateOut(CamelModel):
    token: str
    label: str
    company: str | None
    max_messages: int
    expires_at: datetime
    url: str


class TokenUpdate(CamelModel):
    max_messages: int | None = Field(default=None, ge=1)
    expires_at: datetime | None = None
    label: str | None = None
    company: str | None = None

    @field_validator("max_messages", "expires_at", "label", mode="before")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("label")
    @classmethod
    def _label_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Label cannot be empty")
        return v.strip()

    @field_validator("expires_at")
    @classmethod
    def _naive_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class TokenSummaryOut(CamelModel):
    id: int
    token: str
    label: str
    company: str | None
    max_messages: int
    used_messages: int
    expires_at: datetime
    created_at: datetime
    session_count: int = 0


class PaginationOut(CamelModel):
    current_page: int
    total_pages: int
    total_count: int
    limit: int
    has_next_page: bool
    has_previous_page: bool


class TokenListOut(CamelModel):
    tokens: list[TokenSummaryOut]
    pagination: PaginationOut


class ConversationOut(CamelModel):
    id: int
    message: str
    response: str
    created_at: datetime


class SessionDetailOut(CamelModel):
    id: int
    session_id: str
    created_at: datetime
    conversations: list[ConversationOut] = []


class TokenDetailOut(CamelModel):
    id: int
    token: str
    label: str
    company: str | None
    max_messages: int
    used_messages: int
    expires_at: datetime
    created_at: datetime
    sessions: list[SessionDetailOut] = []
    conversations: list[ConversationOut] = []


class TokenOut(CamelModel):
    id: int
    token: str
    label: str
    company: str | None
    max_messages: int
    used_messages: int
    expires_at: datetime
    created_at: datetime
