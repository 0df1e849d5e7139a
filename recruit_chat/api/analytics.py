"""Validation-failure telemetry endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from api._helpers import client_ip
from auth import require_stats_token
from config import settings
from database import get_db
from schemas.analytics import AnalyticsEventIn, AnalyticsStatsOut
from services.analytics import get_failure_stats, log_validation_failure

router = APIRouter()


def _allowed_origins() -> list[str]:
    origins = [settings.APP_URL.rstrip("/")]
    if settings.VERCEL_URL:
        origins.append(f"https://{settings.VERCEL_URL.rstrip('/')}")
    return [o for o in origins if o]


def _same_origin(request: Request) -> bool:
    """Origin must equal a trusted origin, or Referer must be one or a path under one."""
    origin = (request.headers.get("origin") or "").rstrip("/")
    referer = request.headers.get("referer") or ""
    for allowed in _allowed_origins():
        if origin == allowed:
            return True
        if referer == allowed or referer.startswith(allowed + "/"):
            return True
    return False


@router.post("")
def record_event(
    payload: AnalyticsEventIn,
    request: Request,
    db: Session = Depends(get_db),
):
    if settings.is_production and not _same_origin(request):
        raise HTTPException(status_code=403, detail="Unauthorized")

    log_validation_failure(
        db,
        payload.failure_reason,
        token_string=payload.token_string,
        user_agent=payload.user_agent or request.headers.get("user-agent"),
        ip_address=payload.ip_address or client_ip(request),
        access_type=payload.access_type,
        full_url=payload.full_url,
        metadata=payload.metadata,
    )
    return {"success": True}


@router.get("/stats", response_model=AnalyticsStatsOut, dependencies=[Depends(require_stats_token)])
def failure_stats(days: int = 7, db: Session = Depends(get_db)):
    return get_failure_stats(db, days=days)
