"""Completion gateway: one chat completion per recruiter message."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from sqlalchemy.orm import Session

from config import settings
from services.errors import CompletionError
from services.history import HistoryEntry
from services.knowledge_base import get_system_prompt

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = "I apologize, but I was unable to generate a response. Please try again."


def create_chat_model(
    model_name: str | None = None,
    *,
    api_key: str | None = None,
    base_url: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
    timeout: int | None = None,
) -> BaseChatModel:
    kwargs: dict = {
        "model": model_name or settings.OPENAI_MODEL,
        "temperature": settings.COMPLETION_TEMPERATURE if temperature is None else temperature,
        "max_tokens": max_tokens or settings.COMPLETION_MAX_TOKENS,
        "timeout": timeout or settings.COMPLETION_TIMEOUT,
        # a failed call fails the request; no retries
        "max_retries": 0,
    }
    base_url = base_url or settings.OPENAI_BASE_URL
    if base_url:
        kwargs["base_url"] = base_url
    return ChatOpenAI(api_key=api_key or settings.OPENAI_API_KEY, **kwargs)


def build_messages(system_prompt: str, history: Sequence[HistoryEntry], message: str) -> list[BaseMessage]:
    messages: list[BaseMessage] = [SystemMessage(content=system_prompt)]
    for entry in history:
        if entry.role == "assistant":
            messages.append(AIMessage(content=entry.content))
        else:
            messages.append(HumanMessage(content=entry.content))
    messages.append(HumanMessage(content=message))
    return messages


def _response_text(response) -> str:
    content = getattr(response, "content", None)
    if isinstance(content, list):
        content = "".join(
            part.get("text", "") if isinstance(part, dict) else str(part) for part in content
        )
    return content or ""


def _log_usage(response) -> None:
    usage = getattr(response, "usage_metadata", None)
    if usage and isinstance(usage, dict):
        logger.info(
            "Completion usage: input=%s output=%s",
            usage.get("input_tokens", 0) or 0,
            usage.get("output_tokens", 0) or 0,
        )


class CompletionGateway:
    def __init__(self, llm: BaseChatModel | None = None):
        self._llm = llm

    @property
    def llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = create_chat_model()
        return self._llm

    def generate(self, message: str, history: Sequence[HistoryEntry] = (), *, db: Session | None = None) -> str:
        """Return the model's answer to *message* given the prior *history*.

        Raises CompletionError when the provider call fails.
        """
        messages = build_messages(get_system_prompt(db), history, message)
        try:
            response = self.llm.invoke(messages)
        except Exception as exc:
            logger.exception("Completion provider call failed")
            raise CompletionError("Failed to generate response") from exc

        _log_usage(response)
        text = _response_text(response)
        if not text:
            logger.warning("Completion provider returned no content")
            return FALLBACK_RESPONSE
        return text


completion_gateway = CompletionGateway()


def get_completion_gateway() -> CompletionGateway:
    """FastAPI dependency returning the shared completion gateway."""
    return completion_gateway
