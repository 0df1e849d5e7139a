"""Analytics schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from schemas.base import CamelModel

FailureReasonLiteral = Literal[
    "invalid_token", "token_expired", "message_limit_reached", "server_error", "no_token"
]
AccessTypeLiteral = Literal["page_access", "message_send"]


class AnalyticsEventIn(CamelModel):
    failure_reason: FailureReasonLiteral
    token_string: str | None = None
    user_agent: str | None = None
    ip_address: str | None = None
    access_type: AccessTypeLiteral | None = None
    full_url: str | None = None
    metadata: dict[str, Any] | None = None


class FailureOut(CamelModel):
    failure_reason: str
    created_at: datetime
    access_type: str | None
    full_url: str | None
    user_agent: str | None
    ip_address: str | None


class AnalyticsStatsOut(CamelModel):
    total_failures: int
    failures_by_reason: dict[str, int]
    recent_failures: list[FailureOut]
