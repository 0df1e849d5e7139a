"""Knowledge base loading and the cached system prompt built from it."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from sqlalchemy.orm import Session

from config import settings
from models.knowledge_base import KnowledgeBase

logger = logging.getLogger(__name__)

KNOWLEDGE_BASE_MISSING = (
    "Knowledge base not found. Please contact the candidate directly."
)

SYSTEM_PROMPT_TEMPLATE = """You are an AI assistant representing {name}. Your role is to help recruiters and hiring managers learn more about {name} by answering questions about their background, skills, and experience.

**IMPORTANT GUIDELINES:**
1. Always be professional, helpful, and genuinely enthusiastic about {name}.
2. Only answer questions based on the knowledge base provided below.
3. If you're asked something outside the knowledge base, politely say you're not sure and recommend contacting {name} directly.
4. Use a conversational yet professional tone. Sound human, not robotic.
5. If a recruiter provides a job description, identify the nature of the company and the role, follow the job preferences stated in the knowledge base and explain how {name}'s skills and experience align with the role in bullet points. Highlight the key terms in bold.
6. Be clear and concise. Keep responses focused unless a detailed answer is required.
7. If a URL or link is provided, politely say you are not able to access the internet. If they want to share a job description, ask them to paste it into the chat.

**When the question is too high-level or general (e.g. "Why should I hire {name}?")**
- Provide a brief, impactful summary based on the knowledge base (2-3 sentences max)
- Then ask a relevant follow-up question to guide the conversation

**KNOWLEDGE BASE:**
{knowledge_base}

Remember: you are {name}'s representative. Stay positive, accurate, and helpful, always within the boundaries of the information provided."""


def load_knowledge_base(db: Session | None) -> str:
    """Resolve knowledge base text: database row, then env value, then file."""
    if db is not None:
        try:
            row = KnowledgeBase.current(db)
        except Exception:
            logger.exception("Failed to read knowledge base from database")
            db.rollback()
            row = None
        if row is not None and row.content:
            return row.content

    if settings.KNOWLEDGE_BASE_CONTENT:
        return settings.KNOWLEDGE_BASE_CONTENT

    path = Path(settings.KNOWLEDGE_BASE_FILE)
    try:
        return path.read_text(encoding="utf-8")
    except OSError:
        logger.error("Knowledge base file %s could not be read", path)
        return KNOWLEDGE_BASE_MISSING


def build_system_prompt(knowledge_base: str, name: str | None = None) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(
        name=name or settings.CANDIDATE_NAME,
        knowledge_base=knowledge_base,
    )


class SystemPromptCache:
    """Holds the rendered system prompt until a knowledge base edit invalidates it.

    Loading happens outside the lock; a prompt built while an invalidation
    was in flight is returned to its caller but not stored.
    """

    def __init__(self):
        self._prompt: str | None = None
        self._generation = 0
        self._lock = threading.Lock()

    def get(self, db: Session | None = None) -> str:
        with self._lock:
            if self._prompt is not None:
                return self._prompt
            generation = self._generation
        prompt = build_system_prompt(load_knowledge_base(db))
        with self._lock:
            if self._generation == generation:
                self._prompt = prompt
        return prompt

    def invalidate(self) -> None:
        with self._lock:
            self._prompt = None
            self._generation += 1
        logger.info("System prompt cache invalidated")


prompt_cache = SystemPromptCache()


def get_system_prompt(db: Session | None = None) -> str:
    return prompt_cache.get(db)


def invalidate_system_prompt() -> None:
    prompt_cache.invalidate()
