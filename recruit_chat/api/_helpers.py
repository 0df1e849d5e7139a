"""Shared helpers for API routers."""

from __future__ import annotations

from fastapi import HTTPException, Request
from sqlalchemy.orm import Session

from models.token import Token
from services.errors import FailureReason, TokenValidationError
from services.token_validation import ValidationContext


def client_ip(request: Request) -> str | None:
    """First hop of X-Forwarded-For, then X-Real-IP, then the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else None


def validation_context(request: Request, access_type: str, full_url: str | None = None) -> ValidationContext:
    return ValidationContext(
        access_type=access_type,
        full_url=full_url or request.headers.get("referer"),
        user_agent=request.headers.get("user-agent"),
        ip_address=client_ip(request),
    )


def rejected(exc: TokenValidationError) -> HTTPException:
    """401 carrying the user-facing message and the stable failure reason.

    A storage failure during validation is not the caller's fault and maps to 500.
    """
    if exc.reason == FailureReason.SERVER_ERROR:
        return HTTPException(status_code=500, detail="Internal server error")
    return HTTPException(
        status_code=401,
        detail={"error": exc.message, "reason": exc.reason.value},
    )


def get_token_or_404(token_id: int, db: Session) -> Token:
    token = db.get(Token, token_id)
    if not token:
        raise HTTPException(status_code=404, detail="Token not found")
    return token
