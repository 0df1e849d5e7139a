"""Admin authentication dependencies: HTTP Basic for the admin area, Bearer for stats."""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBasic, HTTPBasicCredentials, HTTPBearer

from config import settings

logger = logging.getLogger(__name__)

basic_scheme = HTTPBasic(realm="Admin Area", auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


def _verify_password(password: str, configured: str) -> bool:
    """Check *password* against the configured value, which may be a bcrypt hash."""
    if not configured:
        return False
    if configured.startswith(("$2a$", "$2b$", "$2y$")):
        import bcrypt

        try:
            return bcrypt.checkpw(password.encode(), configured.encode())
        except (ValueError, UnicodeDecodeError):
            return False
    return secrets.compare_digest(password.encode(), configured.encode())


def require_admin(credentials: HTTPBasicCredentials | None = Depends(basic_scheme)) -> str:
    """FastAPI dependency: validate admin Basic credentials and return the username."""
    challenge = {"WWW-Authenticate": 'Basic realm="Admin Area"'}
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers=challenge,
        )
    username_ok = bool(settings.ADMIN_USERNAME) and secrets.compare_digest(
        credentials.username.encode(), settings.ADMIN_USERNAME.encode()
    )
    if not username_ok or not _verify_password(credentials.password, settings.ADMIN_PASSWORD):
        logger.warning("Rejected admin credentials for user %r", credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers=challenge,
        )
    return credentials.username


def require_stats_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> None:
    """FastAPI dependency: analytics stats need the configured admin access token."""
    expected = settings.ADMIN_ACCESS_TOKEN
    if (
        not expected
        or credentials is None
        or not secrets.compare_digest(credentials.credentials.encode(), expected.encode())
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized access to analytics",
        )
