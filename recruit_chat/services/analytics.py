"""Validation-failure telemetry: best-effort writes and aggregated stats."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import timedelta

from sqlalchemy.orm import Session

from database import utcnow
from models.analytics import TokenAnalytics

logger = logging.getLogger(__name__)

MAX_STATS_DAYS = 30
RECENT_FAILURES_LIMIT = 10

# Column width caps applied to client-supplied strings
FIELD_LIMITS = {
    "token_string": 500,
    "user_agent": 500,
    "ip_address": 45,
    "full_url": 2000,
}


def _truncate(value, limit: int) -> str | None:
    if value is None or value == "":
        return None
    return str(value)[:limit]


def log_validation_failure(
    db: Session,
    failure_reason: str,
    *,
    token_string: str | None = None,
    user_agent: str | None = None,
    ip_address: str | None = None,
    access_type: str | None = None,
    full_url: str | None = None,
    metadata: dict | None = None,
) -> None:
    """Append one failure event. Never raises; a failed write is logged and rolled back."""
    try:
        event = TokenAnalytics(
            failure_reason=failure_reason,
            token_string=_truncate(token_string, FIELD_LIMITS["token_string"]),
            user_agent=_truncate(user_agent, FIELD_LIMITS["user_agent"]),
            ip_address=_truncate(ip_address, FIELD_LIMITS["ip_address"]),
            access_type=access_type,
            full_url=_truncate(full_url, FIELD_LIMITS["full_url"]),
            metadata_=metadata,
        )
        db.add(event)
        db.commit()
    except Exception:
        logger.exception("Failed to log token validation failure (%s)", failure_reason)
        try:
            db.rollback()
        except Exception:
            logger.debug("Rollback after analytics failure also failed", exc_info=True)


def get_failure_stats(db: Session, days: int = 7) -> dict:
    """Failure totals for the last *days* days (capped at 30)."""
    days = max(min(days, MAX_STATS_DAYS), 0)
    since = utcnow() - timedelta(days=days)
    failures = (
        db.query(TokenAnalytics)
        .filter(TokenAnalytics.created_at >= since)
        .order_by(TokenAnalytics.created_at)
        .all()
    )
    by_reason = Counter(f.failure_reason or "unknown" for f in failures)
    return {
        "total_failures": len(failures),
        "failures_by_reason": dict(by_reason),
        "recent_failures": failures[-RECENT_FAILURES_LIMIT:],
    }
