"""Session manager: one session row per page load of the chat."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from models.token import ChatSession
from services.errors import FailureReason, TokenValidationError
from services.token_validation import ValidationContext, validate_token

logger = logging.getLogger(__name__)


def create_session(db: Session, token_string: str, context: ValidationContext | None = None) -> ChatSession:
    """Validate *token_string* and open a fresh session for it.

    Every call mints a new id, so one token can own many sessions.
    """
    if not token_string:
        raise TokenValidationError(FailureReason.NO_TOKEN)

    context = context or ValidationContext(access_type="page_access")
    token = validate_token(db, token_string, context).raise_for_failure()

    session = ChatSession(session_id=str(uuid.uuid4()), token_id=token.id)
    db.add(session)
    db.commit()
    db.refresh(session)
    logger.info("Opened session %s for token %s", session.session_id, token.id)
    return session


def find_session(db: Session, session_id: str | None, token_id: int) -> ChatSession | None:
    """Resolve a client-supplied session id, ignoring ids that belong to another token."""
    if not session_id:
        return None
    return (
        db.query(ChatSession)
        .filter(ChatSession.session_id == session_id, ChatSession.token_id == token_id)
        .first()
    )
