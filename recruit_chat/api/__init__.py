"""FastAPI router aggregation."""

from fastapi import APIRouter

from api.chat import router as chat_router
from api.tokens import router as tokens_router
from api.knowledge_base import router as knowledge_base_router
from api.analytics import router as analytics_router

api_router = APIRouter(prefix="/api")

api_router.include_router(chat_router, tags=["chat"])
api_router.include_router(tokens_router, prefix="/tokens", tags=["tokens"])
api_router.include_router(knowledge_base_router, prefix="/knowledge-base", tags=["knowledge-base"])
api_router.include_router(analytics_router, prefix="/analytics", tags=["analytics"])
