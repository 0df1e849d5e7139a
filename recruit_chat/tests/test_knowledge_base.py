"""Tests for services/knowledge_base.py and the KnowledgeBase model."""

from __future__ import annotations

from unittest.mock import patch

from models.knowledge_base import KnowledgeBase
from services.knowledge_base import (
    KNOWLEDGE_BASE_MISSING,
    SystemPromptCache,
    build_system_prompt,
    get_system_prompt,
    invalidate_system_prompt,
    load_knowledge_base,
)


class TestKnowledgeBaseModel:
    def test_current_none_when_empty(self, db):
        assert KnowledgeBase.current(db) is None

    def test_replace_creates_then_updates_single_row(self, db):
        first = KnowledgeBase.replace(db, "v1")
        second = KnowledgeBase.replace(db, "v2")
        assert first.id == second.id
        assert db.query(KnowledgeBase).count() == 1
        assert KnowledgeBase.current(db).content == "v2"


class TestLoadKnowledgeBase:
    def test_database_row_wins(self, db, _settings, tmp_path):
        KnowledgeBase.replace(db, "from db")
        _settings.KNOWLEDGE_BASE_CONTENT = "from env"
        assert load_knowledge_base(db) == "from db"

    def test_env_content_when_no_row(self, db, _settings):
        _settings.KNOWLEDGE_BASE_CONTENT = "from env"
        assert load_knowledge_base(db) == "from env"

    def test_empty_row_falls_through(self, db, _settings):
        KnowledgeBase.replace(db, "")
        _settings.KNOWLEDGE_BASE_CONTENT = "from env"
        assert load_knowledge_base(db) == "from env"

    def test_file_when_nothing_else(self, db, _settings, tmp_path):
        kb_file = tmp_path / "kb.md"
        kb_file.write_text("# From file", encoding="utf-8")
        _settings.KNOWLEDGE_BASE_FILE = str(kb_file)
        assert load_knowledge_base(db) == "# From file"

    def test_missing_everywhere(self, db):
        assert load_knowledge_base(db) == KNOWLEDGE_BASE_MISSING

    def test_without_db(self, _settings):
        _settings.KNOWLEDGE_BASE_CONTENT = "from env"
        assert load_knowledge_base(None) == "from env"

    def test_db_error_falls_back(self, db, _settings):
        _settings.KNOWLEDGE_BASE_CONTENT = "from env"
        with patch.object(KnowledgeBase, "current", side_effect=RuntimeError("db gone")):
            assert load_knowledge_base(db) == "from env"


class TestSystemPrompt:
    def test_prompt_embeds_name_and_knowledge(self):
        prompt = build_system_prompt("Ten years of Python.", name="Alex")
        assert "representing Alex" in prompt
        assert "Ten years of Python." in prompt
        assert "{name}" not in prompt

    def test_default_name_from_settings(self):
        assert "representing Alex" in build_system_prompt("kb")

    def test_cache_reuses_prompt(self, db):
        cache = SystemPromptCache()
        KnowledgeBase.replace(db, "first")
        assert "first" in cache.get(db)
        KnowledgeBase.replace(db, "second")
        assert "first" in cache.get(db)
        cache.invalidate()
        assert "second" in cache.get(db)

    def test_invalidate_during_load_discards_stale_prompt(self, db):
        cache = SystemPromptCache()
        KnowledgeBase.replace(db, "OLD FACTS")

        def load_then_edit(session):
            # An admin edit lands while this request is still building its prompt.
            KnowledgeBase.replace(session, "NEW FACTS")
            cache.invalidate()
            return "OLD FACTS"

        with patch("services.knowledge_base.load_knowledge_base", side_effect=load_then_edit):
            assert "OLD FACTS" in cache.get(db)

        prompt = cache.get(db)
        assert "NEW FACTS" in prompt
        assert "OLD FACTS" not in prompt

    def test_module_helpers_share_cache(self, db):
        KnowledgeBase.replace(db, "alpha")
        assert "alpha" in get_system_prompt(db)
        KnowledgeBase.replace(db, "beta")
        assert "alpha" in get_system_prompt(db)
        invalidate_system_prompt()
        assert "beta" in get_system_prompt(db)
