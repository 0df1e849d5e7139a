"""Tests for services/history.py: the per-token conversation buffer."""

from __future__ import annotations

import threading

from services.history import ConversationHistoryCache, HistoryEntry, get_history_cache, history_cache


def _turn(i: int) -> tuple[HistoryEntry, HistoryEntry]:
    return HistoryEntry("user", f"question {i}"), HistoryEntry("assistant", f"answer {i}")


class TestConversationHistoryCache:
    def test_unknown_token_is_empty(self):
        cache = ConversationHistoryCache()
        assert cache.get_history("nope") == []

    def test_append_turn_keeps_order(self):
        cache = ConversationHistoryCache()
        cache.append_turn("t1", *_turn(1))
        cache.append_turn("t1", *_turn(2))
        entries = cache.get_history("t1")
        assert [e.content for e in entries] == ["question 1", "answer 1", "question 2", "answer 2"]
        assert [e.role for e in entries] == ["user", "assistant", "user", "assistant"]

    def test_capped_at_twenty_entries(self):
        cache = ConversationHistoryCache(max_entries=20)
        for i in range(1, 12):
            cache.append_turn("t1", *_turn(i))
        entries = cache.get_history("t1")
        assert len(entries) == 20
        # the first exchange fell off
        assert entries[0].content == "question 2"
        assert entries[-1].content == "answer 11"

    def test_tokens_are_isolated(self):
        cache = ConversationHistoryCache()
        cache.append_turn("a", *_turn(1))
        cache.append_turn("b", *_turn(2))
        assert cache.get_history("a")[0].content == "question 1"
        assert cache.get_history("b")[0].content == "question 2"
        assert cache.get_history("c") == []

    def test_get_history_returns_copy(self):
        cache = ConversationHistoryCache()
        cache.append_turn("t1", *_turn(1))
        entries = cache.get_history("t1")
        entries.clear()
        assert len(cache.get_history("t1")) == 2

    def test_discard_and_clear(self):
        cache = ConversationHistoryCache()
        cache.append_turn("a", *_turn(1))
        cache.append_turn("b", *_turn(1))
        cache.discard("a")
        cache.discard("missing")
        assert cache.get_history("a") == []
        cache.clear()
        assert cache.get_history("b") == []

    def test_concurrent_appends(self):
        cache = ConversationHistoryCache(max_entries=1000)

        def _worker(n):
            for i in range(50):
                cache.append_turn("t1", *_turn(n * 100 + i))

        threads = [threading.Thread(target=_worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        entries = cache.get_history("t1")
        assert len(entries) == 400
        # user/assistant pairs are never interleaved
        for user, assistant in zip(entries[::2], entries[1::2]):
            assert user.role == "user" and assistant.role == "assistant"
            assert user.content.split()[1] == assistant.content.split()[1]


def test_dependency_returns_shared_cache():
    assert get_history_cache() is history_cache
