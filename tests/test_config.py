"""Tests for configuration, prompts and search-result parsing."""

from board_backend.config import CompletionConfig, get_config, reset_config
from board_backend.prompts import SYSTEM_PROMPT_BASE, build_system_prompt
from board_backend.subagents import parse_search_results
from board_core.models import Viewport


class TestConfig:
    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("BOARD_AI_MODEL", "custom-model")
        monkeypatch.setenv("BOARD_AI_MAX_TOKENS", "123")
        config = CompletionConfig()
        assert config.model == "custom-model"
        assert config.max_tokens == 123

    def test_headers_without_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        headers = CompletionConfig().headers()
        assert "x-api-key" not in headers
        assert headers["content-type"] == "application/json"

    def test_singleton_and_reset(self, monkeypatch):
        reset_config()
        first = get_config()
        assert get_config() is first
        monkeypatch.setenv("BOARD_LOG_LEVEL", "DEBUG")
        reset_config()
        assert get_config().log_level == "DEBUG"
        reset_config()


class TestSystemPrompt:
    def test_without_viewport(self):
        assert build_system_prompt() == SYSTEM_PROMPT_BASE

    def test_cursor_and_selection(self):
        viewport = Viewport(
            left=-100.4, top=0, right=900, bottom=600.6,
            cursor_x=10.2, cursor_y=20.7, selected_ids=["a", "b"],
        )
        prompt = build_system_prompt(viewport)
        assert "Viewport: (-100,0) to (900,601). Cursor: (10,21)." in prompt
        assert prompt.endswith("Selected objects: a, b")


class TestParseSearchResults:
    def test_lines(self):
        text = "swot|S; W ;; O|grid\n\n  kanban | To Do; Done \nbare"
        assert parse_search_results(text) == [
            {"name": "swot", "slots": ["S", "W", "O"], "reason": "grid"},
            {"name": "kanban", "slots": ["To Do", "Done"], "reason": ""},
            {"name": "bare", "slots": [], "reason": ""},
        ]
