"""
Client Configuration

Settings are read from the environment with defaults:

    BROCHAT_BASE_URL      Base URL of the REST API
    BROCHAT_FEED_URL      WebSocket URL of the real-time feed
    BROCHAT_TIMEOUT       Connect/read timeout in seconds
    BROCHAT_ACCESS_TOKEN  Access token for the Authorization header
    BROCHAT_TOKEN_TYPE    Token type, usually "Bearer"
    BROCHAT_LOG_LEVEL     Logging level name for the command line tool
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .client import DEFAULT_TIMEOUT, DEFAULT_TOKEN_TYPE, AuthInfo, BroChatClient

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_FEED_URL = "ws://localhost:8080/api/brochat/feed"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class ClientConfig:
    """
    Settings for the BroChat client and feed connection.

    Attributes:
        base_url: Base URL of the REST API
        feed_url: WebSocket URL of the feed
        timeout: Connect/read timeout in seconds
        access_token: Access token (may be empty)
        token_type: Token type for the Authorization header
        log_level: Logging level name
    """

    base_url: str = DEFAULT_BASE_URL
    feed_url: str = DEFAULT_FEED_URL
    timeout: float = DEFAULT_TIMEOUT
    access_token: str = ""
    token_type: str = DEFAULT_TOKEN_TYPE
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """
        Load configuration from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            ValueError: If BROCHAT_TIMEOUT is not a positive number
        """
        env = os.environ if environ is None else environ

        timeout_env = env.get("BROCHAT_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(timeout_env)
        except ValueError:
            raise ValueError(
                f"BROCHAT_TIMEOUT must be a number, got {timeout_env!r}"
            ) from None
        if timeout <= 0:
            raise ValueError(f"BROCHAT_TIMEOUT must be positive, got {timeout_env!r}")

        return cls(
            base_url=env.get("BROCHAT_BASE_URL", DEFAULT_BASE_URL),
            feed_url=env.get("BROCHAT_FEED_URL", DEFAULT_FEED_URL),
            timeout=timeout,
            access_token=env.get("BROCHAT_ACCESS_TOKEN", ""),
            token_type=env.get("BROCHAT_TOKEN_TYPE", DEFAULT_TOKEN_TYPE),
            log_level=env.get("BROCHAT_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )

    def auth_info(self) -> AuthInfo:
        """Build the AuthInfo for the configured token."""
        return AuthInfo(access_token=self.access_token, token_type=self.token_type)

    def create_client(self) -> BroChatClient:
        """Build a BroChatClient for the configured server."""
        return BroChatClient(self.base_url, timeout=self.timeout)

    def __repr__(self) -> str:
        return (
            f"ClientConfig(base_url={self.base_url!r}, feed_url={self.feed_url!r}, "
            f"timeout={self.timeout!r}, token_type={self.token_type!r}, "
            f"log_level={self.log_level!r})"
        )
