"""Token administration: minting, listing, detail and edits."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from config import settings
from database import utcnow
from models.conversation import Conversation
from models.token import ChatSession, Token, new_token_string

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


# ── Sorting ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class AggregateSort:
    """Order tokens by an aggregate over a child table joined on ``token_id``."""

    model: type
    column: str
    aggregate: str = "max"

    def expression(self):
        child_col = getattr(self.model, self.column)
        agg = getattr(func, self.aggregate)(child_col).label("sort_value")
        subq = (
            select(self.model.token_id.label("token_id"), agg)
            .group_by(self.model.token_id)
            .subquery()
        )
        return subq, subq.c.sort_value


COLUMN_SORTS = {
    "label": Token.label,
    "company": Token.company,
    "createdAt": Token.created_at,
}

AGGREGATE_SORTS: dict[str, AggregateSort] = {
    "latestMessage": AggregateSort(Conversation, "created_at"),
    "latestSession": AggregateSort(ChatSession, "created_at"),
}

SORT_KEYS = tuple(COLUMN_SORTS) + tuple(AGGREGATE_SORTS)


def _order(column, descending: bool):
    # tokens with no children sort last in both directions
    ordered = column.desc() if descending else column.asc()
    return ordered.nulls_last()


def list_tokens(
    db: Session,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
) -> dict:
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    if sort_by not in SORT_KEYS:
        sort_by = "createdAt"
    descending = sort_order != "asc"

    session_counts = (
        select(ChatSession.token_id, func.count(ChatSession.id).label("session_count"))
        .group_by(ChatSession.token_id)
        .subquery()
    )
    stmt = select(Token, func.coalesce(session_counts.c.session_count, 0)).outerjoin(
        session_counts, session_counts.c.token_id == Token.id
    )

    if sort_by in AGGREGATE_SORTS:
        subq, sort_col = AGGREGATE_SORTS[sort_by].expression()
        stmt = stmt.outerjoin(subq, subq.c.token_id == Token.id)
    else:
        sort_col = COLUMN_SORTS[sort_by]
    stmt = stmt.order_by(
        _order(sort_col, descending),
        Token.id.desc() if descending else Token.id.asc(),
    ).execution_options(populate_existing=True)

    total = db.execute(select(func.count(Token.id))).scalar() or 0
    rows = db.execute(stmt.offset((page - 1) * limit).limit(limit)).all()
    total_pages = math.ceil(total / limit) if total else 0

    return {
        "tokens": [_token_summary(token, count) for token, count in rows],
        "pagination": {
            "current_page": page,
            "total_pages": total_pages,
            "total_count": total,
            "limit": limit,
            "has_next_page": page < total_pages,
            "has_previous_page": page > 1,
        },
    }


def _token_summary(token: Token, session_count: int) -> dict:
    return {
        "id": token.id,
        "token": token.token,
        "label": token.label,
        "company": token.company,
        "max_messages": token.max_messages,
        "used_messages": token.used_messages,
        "expires_at": token.expires_at,
        "created_at": token.created_at,
        "session_count": session_count,
    }


# ── Minting ───────────────────────────────────────────────────────────────────


def share_url(token_string: str) -> str:
    return f"{settings.APP_URL}?token={token_string}"


def generate_token(
    db: Session,
    label: str,
    company: str | None = None,
    max_messages: int | None = None,
    validity_days: int | None = None,
) -> Token:
    """Mint a new token. Expiry is *validity_days* after creation, same time of day."""
    max_messages = settings.DEFAULT_MAX_MESSAGES if max_messages is None else max_messages
    validity_days = settings.DEFAULT_VALIDITY_DAYS if validity_days is None else validity_days
    created_at = utcnow()
    token = Token(
        token=new_token_string(),
        label=label,
        company=company or None,
        max_messages=max_messages,
        used_messages=0,
        created_at=created_at,
        expires_at=created_at + timedelta(days=validity_days),
    )
    db.add(token)
    db.commit()
    db.refresh(token)
    logger.info("Generated token %s for %r (%d messages, %d days)", token.id, label, max_messages, validity_days)
    return token


# ── Detail & edits ────────────────────────────────────────────────────────────


def get_token_detail(db: Session, token_id: int) -> Token | None:
    return (
        db.query(Token)
        .populate_existing()
        .options(
            selectinload(Token.sessions).selectinload(ChatSession.conversations),
            selectinload(Token.conversations),
        )
        .filter(Token.id == token_id)
        .first()
    )


UPDATABLE_FIELDS = ("max_messages", "expires_at", "label", "company")


def update_token(db: Session, token: Token, changes: dict) -> Token:
    for attr, value in changes.items():
        if attr not in UPDATABLE_FIELDS:
            continue
        if attr == "company":
            value = value or None
        setattr(token, attr, value)
    db.commit()
    db.refresh(token)
    logger.info("Updated token %s: %s", token.id, ", ".join(sorted(changes)))
    return token
