"""SQLAlchemy models: re-export all."""

from models.token import Token, ChatSession  # noqa: F401
from models.conversation import Conversation  # noqa: F401
from models.analytics import TokenAnalytics  # noqa: F401
from models.knowledge_base import KnowledgeBase  # noqa: F401
