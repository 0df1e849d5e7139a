"""Token admin router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from api._helpers import get_token_or_404
from auth import require_admin
from database import get_db
from schemas.token import TokenDetailOut, TokenGenerateIn, TokenGenerateOut, TokenListOut, TokenOut, TokenUpdate
from services.tokens import DEFAULT_PAGE_SIZE, generate_token, get_token_detail, list_tokens, share_url, update_token

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=TokenListOut)
def list_tokens_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    db: Session = Depends(get_db),
):
    return list_tokens(db, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)


@router.post("/generate", response_model=TokenGenerateOut)
def generate_token_endpoint(
    payload: TokenGenerateIn,
    db: Session = Depends(get_db),
):
    token = generate_token(
        db,
        label=payload.label,
        company=payload.company,
        max_messages=payload.max_messages,
        validity_days=payload.validity_days,
    )
    return TokenGenerateOut(
        token=token.token,
        label=token.label,
        company=token.company,
        max_messages=token.max_messages,
        expires_at=token.expires_at,
        url=share_url(token.token),
    )


@router.get("/{token_id}", response_model=TokenDetailOut)
def get_token_endpoint(
    token_id: int,
    db: Session = Depends(get_db),
):
    token = get_token_detail(db, token_id)
    if not token:
        raise HTTPException(status_code=404, detail="Token not found")
    return token


@router.patch("/{token_id}", response_model=TokenOut)
def update_token_endpoint(
    token_id: int,
    payload: TokenUpdate,
    db: Session = Depends(get_db),
):
    token = get_token_or_404(token_id, db)
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    return update_token(db, token, changes)
