"""Domain exceptions raised by services and translated to HTTP by the routers."""

from __future__ import annotations

from enum import Enum


class FailureReason(str, Enum):
    NO_TOKEN = "no_token"
    INVALID_TOKEN = "invalid_token"
    TOKEN_EXPIRED = "token_expired"
    MESSAGE_LIMIT_REACHED = "message_limit_reached"
    SERVER_ERROR = "server_error"


INACTIVE_LINK_MESSAGE = (
    "This link doesn't seem to be active anymore. "
    "Please get in touch with the candidate to regain access."
)
LIMIT_REACHED_MESSAGE = (
    "Maximum message limit reached. "
    "Please get in touch with the candidate if you'd like to continue."
)

FAILURE_MESSAGES: dict[FailureReason, str] = {
    FailureReason.NO_TOKEN: "An access token is required.",
    FailureReason.INVALID_TOKEN: INACTIVE_LINK_MESSAGE,
    FailureReason.TOKEN_EXPIRED: INACTIVE_LINK_MESSAGE,
    FailureReason.MESSAGE_LIMIT_REACHED: LIMIT_REACHED_MESSAGE,
    FailureReason.SERVER_ERROR: "Internal server error",
}


class TokenValidationError(Exception):
    """A token was rejected; carries the stable failure reason."""

    def __init__(self, reason: FailureReason, message: str | None = None):
        self.reason = reason
        self.message = message or FAILURE_MESSAGES[reason]
        super().__init__(self.message)


class CompletionError(Exception):
    """The completion provider call failed."""
