"""Board agent configuration -- completion endpoint, models, runtime settings."""

import os
from dataclasses import dataclass, field


@dataclass
class CompletionConfig:
    """Configuration for the completion API."""

    api_url: str = field(
        default_factory=lambda: os.environ.get(
            "BOARD_AI_API_URL", "https://api.anthropic.com/v1/messages"
        )
    )
    api_key: str = field(
        default_factory=lambda: os.environ.get("ANTHROPIC_API_KEY", "")
    )
    api_version: str = field(
        default_factory=lambda: os.environ.get("BOARD_AI_API_VERSION", "2023-06-01")
    )
    model: str = field(
        default_factory=lambda: os.environ.get("BOARD_AI_MODEL", "claude-sonnet-4-6")
    )
    fast_model: str = field(
        default_factory=lambda: os.environ.get(
            "BOARD_AI_FAST_MODEL", "claude-3-5-haiku-latest"
        )
    )
    max_tokens: int = field(
        default_factory=lambda: int(os.environ.get("BOARD_AI_MAX_TOKENS", "16000"))
    )
    thinking_budget: int = field(
        default_factory=lambda: int(os.environ.get("BOARD_AI_THINKING_BUDGET", "10000"))
    )
    plain_max_tokens: int = 4096
    fast_max_tokens: int = 1024
    timeout: float = field(
        default_factory=lambda: float(os.environ.get("BOARD_AI_TIMEOUT", "300"))
    )

    def headers(self) -> dict[str, str]:
        """Static request headers for every completion call."""
        headers = {
            "content-type": "application/json",
            "anthropic-version": self.api_version,
        }
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers


@dataclass
class BoardConfig:
    """Top-level configuration for the board agent."""

    completion: CompletionConfig = field(default_factory=CompletionConfig)
    log_level: str = field(
        default_factory=lambda: os.environ.get("BOARD_LOG_LEVEL", "INFO")
    )


# Singleton for convenience
_config: BoardConfig | None = None


def get_config() -> BoardConfig:
    """Get or create the global board agent configuration."""
    global _config
    if _config is None:
        _config = BoardConfig()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
