"""Usage accounting: charge a token for one completed exchange."""

from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from database import atomic
from models.conversation import Conversation
from models.token import Token
from services.errors import FailureReason, TokenValidationError

logger = logging.getLogger(__name__)


def record_exchange(
    db: Session,
    token_id: int,
    message: str,
    response: str,
    session_pk: int | None = None,
) -> int:
    """Persist the exchange and bump ``used_messages`` in one transaction.

    The increment only applies while the token still has messages left, so two
    requests racing for the last message cannot both be charged; the loser's
    transaction is rolled back and it fails with ``message_limit_reached``.
    Returns the number of messages left after this one.
    """
    with atomic(db):
        result = db.execute(
            update(Token)
            .where(Token.id == token_id, Token.used_messages < Token.max_messages)
            .values(used_messages=Token.used_messages + 1)
        )
        if result.rowcount != 1:
            raise TokenValidationError(FailureReason.MESSAGE_LIMIT_REACHED)

        db.add(
            Conversation(
                token_id=token_id,
                session_id=session_pk,
                message=message,
                response=response,
            )
        )
        db.flush()

        used, limit = (
            db.query(Token.used_messages, Token.max_messages).filter(Token.id == token_id).one()
        )

    remaining = max(limit - used, 0)
    logger.info("Recorded exchange for token %s (%d/%d used)", token_id, used, limit)
    return remaining
