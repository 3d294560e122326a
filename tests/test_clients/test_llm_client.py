"""Tests for LLMClient (Claude API wrapper)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from resume_forge.clients.llm_client import DEFAULT_MODEL, LLMClient, LLMResponse

CLIENT_CLS = "resume_forge.clients.llm_client.anthropic.AsyncAnthropic"


def _make_api_message(text: str, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    """Build a mock anthropic Message-like object."""
    message = MagicMock()
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    message.content = [MagicMock(text=text)]
    return message


class TestLLMClientInit:
    def test_init_default_creates_client_with_no_kwargs(self):
        """Creates AsyncAnthropic with no extra kwargs when no args supplied."""
        with patch(CLIENT_CLS) as mock_cls:
            llm = LLMClient()
            mock_cls.assert_called_once_with()
        assert llm.max_attempts == 1

    def test_init_with_api_key_passes_key(self):
        with patch(CLIENT_CLS) as mock_cls:
            LLMClient(api_key="test-key")
            mock_cls.assert_called_once_with(api_key="test-key")

    def test_init_with_both_params_passes_both(self):
        with patch(CLIENT_CLS) as mock_cls:
            LLMClient(api_key="test-key", timeout=30.0)
            mock_cls.assert_called_once_with(api_key="test-key", timeout=30.0)


class TestLLMClientGenerate:
    async def test_generate_returns_llm_response(self):
        """generate() wraps API response fields into an LLMResponse dataclass."""
        with patch(CLIENT_CLS) as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(
                return_value=_make_api_message('{"a": 1}', input_tokens=100, output_tokens=50)
            )
            mock_cls.return_value = mock_client

            llm = LLMClient()
            result = await llm.generate("write a resume", system="be terse")

        assert isinstance(result, LLMResponse)
        assert result.text == '{"a": 1}'
        assert result.input_tokens == 100
        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["model"] == DEFAULT_MODEL
        assert kwargs["system"] == "be terse"
        assert kwargs["messages"] == [{"role": "user", "content": "write a resume"}]

    async def test_empty_system_not_sent(self):
        with patch(CLIENT_CLS) as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(return_value=_make_api_message("x"))
            mock_cls.return_value = mock_client

            await LLMClient().generate("prompt")

        assert "system" not in mock_client.messages.create.call_args.kwargs

    async def test_single_attempt_by_default(self):
        """A failing call is raised without retrying unless asked to."""
        with patch(CLIENT_CLS) as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(side_effect=RuntimeError("overloaded"))
            mock_cls.return_value = mock_client

            llm = LLMClient()
            with pytest.raises(RuntimeError, match="overloaded"):
                await llm.generate("prompt")

        assert mock_client.messages.create.await_count == 1
        assert llm._token_log == []

    async def test_retries_when_configured(self):
        with patch(CLIENT_CLS) as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(
                side_effect=[RuntimeError("overloaded"), _make_api_message("ok")]
            )
            mock_cls.return_value = mock_client

            result = await LLMClient(max_attempts=2).generate("prompt")

        assert result.text == "ok"
        assert mock_client.messages.create.await_count == 2

    async def test_token_log_stores_model_and_counts(self):
        """_token_log entries are (model, input_tokens, output_tokens) tuples."""
        with patch(CLIENT_CLS) as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(
                return_value=_make_api_message("resp", input_tokens=20, output_tokens=8)
            )
            mock_cls.return_value = mock_client

            llm = LLMClient()
            await llm.generate("prompt one", model="claude-test")
            await llm.generate("prompt two", model="claude-test")

        assert len(llm._token_log) == 2
        assert llm._token_log[0] == ("claude-test", 20, 8)


class TestLLMClientTokenSummary:
    def test_get_token_summary_returns_totals_and_clears(self):
        with patch(CLIENT_CLS):
            llm = LLMClient()
            llm._token_log = [
                (DEFAULT_MODEL, 100, 50),
                (DEFAULT_MODEL, 200, 80),
            ]

        summary = llm.get_token_summary()

        assert summary["input"] == 300
        assert summary["output"] == 130
        assert len(summary["calls"]) == 2
        assert llm.get_token_summary() == {"input": 0, "output": 0, "calls": []}
