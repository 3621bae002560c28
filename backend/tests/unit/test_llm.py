"""Unit tests for the LLM module (no network calls)."""
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from jobhunt.services.llm import LLMError, _strip_code_fence, claude_chat_json, parse_json_reply


class TestStripCodeFence:
    def test_plain_json_unchanged(self):
        raw = '{"key": "value"}'
        assert _strip_code_fence(raw) == raw

    def test_strips_json_fence(self):
        raw = '```json\n{"key": "value"}\n```'
        assert _strip_code_fence(raw) == '{"key": "value"}'

    def test_strips_generic_fence(self):
        raw = '```\n{"key": "value"}\n```'
        assert _strip_code_fence(raw) == '{"key": "value"}'

    def test_leading_trailing_whitespace(self):
        raw = '  ```json\n{"key": 1}\n```  '
        assert _strip_code_fence(raw) == '{"key": 1}'


class TestParseJsonReply:
    def test_object_wrapped_in_prose(self):
        raw = 'Here is the analysis:\n{"confidenceScore": 70}\nLet me know if you need more.'
        assert parse_json_reply(raw) == {"confidenceScore": 70}

    def test_array_reply(self):
        assert parse_json_reply("[1, 2]") == [1, 2]

    def test_garbage_raises(self):
        with pytest.raises(LLMError, match="not valid JSON"):
            parse_json_reply("I could not analyze this resume.")


class TestClaudeChatJsonNoKey:
    def test_raises_when_no_api_key(self, monkeypatch):
        from jobhunt.core import config
        monkeypatch.setattr(config.settings, "ANTHROPIC_API_KEY", None)

        with pytest.raises(LLMError, match="ANTHROPIC_API_KEY"):
            claude_chat_json([{"role": "user", "content": "hello"}])


class TestClaudeChatJson:
    @patch("jobhunt.services.llm.anthropic.Anthropic")
    def test_system_message_is_lifted(self, mock_client_cls, monkeypatch):
        from jobhunt.core import config
        monkeypatch.setattr(config.settings, "ANTHROPIC_API_KEY", "sk-test")

        reply = SimpleNamespace(
            content=[SimpleNamespace(type="text", text='```json\n{"ok": true}\n```')],
            stop_reason="end_turn",
        )
        stream = MagicMock()
        stream.__enter__.return_value.get_final_message.return_value = reply
        mock_client_cls.return_value.messages.stream.return_value = stream

        result = claude_chat_json(
            [{"role": "system", "content": "Be terse."}, {"role": "user", "content": "hi"}],
            max_tokens=100,
        )

        assert result == {"ok": True}
        kwargs = mock_client_cls.return_value.messages.stream.call_args.kwargs
        assert kwargs["system"] == "Be terse."
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert kwargs["max_tokens"] == 100
