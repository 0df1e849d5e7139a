"""Chat and session schemas."""

from __future__ import annotations

from datetime import datetime

from schemas.base import CamelModel


class ChatIn(CamelModel):
    # presence is checked by the router so a missing field is a 400, not a 422
    message: str = ""
    token: str = ""
    session_id: str | None = None


class ChatOut(CamelModel):
    response: str
    remaining_messages: int


class SessionIn(CamelModel):
    token: str = ""
    full_url: str | None = None


class SessionOut(CamelModel):
    session_id: str
    created_at: datetime
