"""Recruiter-facing chat and session endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from api._helpers import rejected, validation_context
from database import get_db
from schemas.chat import ChatIn, ChatOut, SessionIn, SessionOut
from services.analytics import log_validation_failure
from services.errors import CompletionError, TokenValidationError
from services.history import ConversationHistoryCache, HistoryEntry, get_history_cache
from services.llm import CompletionGateway, get_completion_gateway
from services.sessions import create_session, find_session
from services.token_validation import validate_token
from services.usage import record_exchange

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat", response_model=ChatOut)
def chat(
    payload: ChatIn,
    request: Request,
    db: Session = Depends(get_db),
    history: ConversationHistoryCache = Depends(get_history_cache),
    gateway: CompletionGateway = Depends(get_completion_gateway),
):
    if not payload.message or not payload.token:
        raise HTTPException(status_code=400, detail="Message and token are required")

    context = validation_context(request, "message_send")
    try:
        token = validate_token(db, payload.token, context).raise_for_failure()
    except TokenValidationError as exc:
        raise rejected(exc)

    prior_turns = history.get_history(payload.token)
    try:
        response = gateway.generate(payload.message, prior_turns, db=db)
    except CompletionError:
        raise HTTPException(status_code=500, detail="Internal server error")

    session = find_session(db, payload.session_id, token.id)
    try:
        remaining = record_exchange(
            db,
            token.id,
            payload.message,
            response,
            session_pk=session.id if session else None,
        )
    except TokenValidationError as exc:
        # another request consumed the last message while this one was generating
        log_validation_failure(
            db,
            exc.reason.value,
            token_string=payload.token,
            user_agent=context.user_agent,
            ip_address=context.ip_address,
            access_type=context.access_type,
            full_url=context.full_url,
        )
        raise rejected(exc)

    history.append_turn(
        payload.token,
        HistoryEntry(role="user", content=payload.message),
        HistoryEntry(role="assistant", content=response),
    )
    return ChatOut(response=response, remaining_messages=remaining)


@router.post("/sessions", response_model=SessionOut)
def open_session(
    payload: SessionIn,
    request: Request,
    db: Session = Depends(get_db),
):
    if not payload.token:
        raise HTTPException(status_code=400, detail="Token is required")

    context = validation_context(request, "page_access", full_url=payload.full_url)
    try:
        session = create_session(db, payload.token, context)
    except TokenValidationError as exc:
        raise rejected(exc)
    return SessionOut(session_id=session.session_id, created_at=session.created_at)
