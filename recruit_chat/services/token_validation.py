"""Access token validation.

A token is usable when it exists, has not expired and still has messages left.
The checks run in that order and the first failing one decides the reason.
Validation never mutates the token; usage is charged separately once a
completion has actually been produced (see ``services.usage``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from database import utcnow
from models.token import Token
from services.analytics import log_validation_failure
from services.errors import FAILURE_MESSAGES, FailureReason, TokenValidationError

logger = logging.getLogger(__name__)


@dataclass
class ValidationContext:
    access_type: str | None = None  # "page_access" | "message_send"
    full_url: str | None = None
    user_agent: str | None = None
    ip_address: str | None = None
    skip_analytics: bool = False


@dataclass
class ValidatedToken:
    id: int
    label: str
    used_messages: int
    max_messages: int
    expires_at: datetime

    @property
    def remaining_messages(self) -> int:
        return max(self.max_messages - self.used_messages, 0)


@dataclass
class ValidationResult:
    valid: bool
    token: ValidatedToken | None = None
    reason: FailureReason | None = None
    message: str | None = None

    def raise_for_failure(self) -> ValidatedToken:
        """Return the token, or raise TokenValidationError carrying the reason."""
        if not self.valid:
            raise TokenValidationError(self.reason, self.message)
        return self.token


def _check(db: Session, token_string: str, now: datetime) -> ValidationResult:
    token = db.query(Token).populate_existing().filter(Token.token == token_string).first()
    if token is None:
        return _failure(FailureReason.INVALID_TOKEN)
    if token.expires_at < now:
        return _failure(FailureReason.TOKEN_EXPIRED)
    if token.used_messages >= token.max_messages:
        return _failure(FailureReason.MESSAGE_LIMIT_REACHED)
    return ValidationResult(
        valid=True,
        token=ValidatedToken(
            id=token.id,
            label=token.label,
            used_messages=token.used_messages,
            max_messages=token.max_messages,
            expires_at=token.expires_at,
        ),
    )


def _failure(reason: FailureReason) -> ValidationResult:
    return ValidationResult(valid=False, reason=reason, message=FAILURE_MESSAGES[reason])


def validate_token(
    db: Session,
    token_string: str | None,
    context: ValidationContext | None = None,
    *,
    now: datetime | None = None,
) -> ValidationResult:
    context = context or ValidationContext()
    now = now or utcnow()

    if not token_string:
        result = _failure(FailureReason.NO_TOKEN)
    else:
        try:
            result = _check(db, token_string, now)
        except Exception:
            logger.exception("Token validation failed on storage access")
            db.rollback()
            result = _failure(FailureReason.SERVER_ERROR)

    if not result.valid:
        logger.info(
            "Token rejected: reason=%s access_type=%s", result.reason.value, context.access_type
        )
        if not context.skip_analytics:
            log_validation_failure(
                db,
                result.reason.value,
                token_string=token_string,
                user_agent=context.user_agent,
                ip_address=context.ip_address,
                access_type=context.access_type,
                full_url=context.full_url,
            )
    return result
