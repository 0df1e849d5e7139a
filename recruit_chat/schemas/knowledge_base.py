"""Knowledge base schemas."""

from __future__ import annotations

from typing import Any

from schemas.base import CamelModel


class KnowledgeBaseIn(CamelModel):
    # type is checked by the router: non-string content is a 400
    content: Any = None


class KnowledgeBaseOut(CamelModel):
    content: str


class KnowledgeBaseUpdateOut(CamelModel):
    message: str
    id: int
