"""Knowledge base read/replace endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from auth import require_admin
from database import get_db
from models.knowledge_base import KnowledgeBase
from schemas.knowledge_base import KnowledgeBaseIn, KnowledgeBaseOut, KnowledgeBaseUpdateOut
from services.knowledge_base import invalidate_system_prompt

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=KnowledgeBaseOut)
def get_knowledge_base(db: Session = Depends(get_db)):
    row = KnowledgeBase.current(db)
    return KnowledgeBaseOut(content=row.content if row else "")


@router.post("", response_model=KnowledgeBaseUpdateOut)
def replace_knowledge_base(payload: KnowledgeBaseIn, db: Session = Depends(get_db)):
    if not isinstance(payload.content, str):
        raise HTTPException(status_code=400, detail="Content must be a string")
    row = KnowledgeBase.replace(db, payload.content)
    invalidate_system_prompt()
    logger.info("Knowledge base replaced (%d chars)", len(payload.content))
    return KnowledgeBaseUpdateOut(message="Knowledge base updated successfully", id=row.id)
