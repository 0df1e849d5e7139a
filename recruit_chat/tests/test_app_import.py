"""Tests that import main.py, covering app creation, lifespan and router registration."""

from __future__ import annotations

import asyncio
from unittest.mock import patch


class TestAppSetup:
    @patch("main.engine")
    def test_app_exists(self, mock_engine):
        from main import app
        assert app is not None
        assert app.title == "Recruiter Chat API"

    @patch("main.engine")
    @patch("main.Base")
    def test_startup_creates_tables(self, mock_base, mock_engine):
        from main import lifespan, app

        async def _run():
            async with lifespan(app):
                pass

        asyncio.run(_run())
        mock_base.metadata.create_all.assert_called_once_with(bind=mock_engine)

    def test_routers_registered(self):
        from main import app

        route_paths = {r.path for r in app.routes if hasattr(r, "path")}
        for path in (
            "/api/chat",
            "/api/sessions",
            "/api/tokens",
            "/api/tokens/generate",
            "/api/tokens/{token_id}",
            "/api/knowledge-base",
            "/api/analytics",
            "/api/analytics/stats",
            "/health",
        ):
            assert path in route_paths
