"""
Anthropic Claude API client.

Requires ANTHROPIC_API_KEY set in environment (or .env file).
Optionally set ANTHROPIC_MODEL to override the default model.

There is no retry here: a failed call or an unparseable reply raises LLMError
and the caller's request fails.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional

import anthropic

from jobhunt.core.config import settings

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```\s*$", re.DOTALL)
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


class LLMError(Exception):
    """Raised when the LLM API request or response is invalid."""


def _strip_code_fence(text: str) -> str:
    """Remove markdown code fences if Claude wraps JSON in them."""
    match = _CODE_FENCE_RE.match(text.strip())
    return match.group(1).strip() if match else text.strip()


def parse_json_reply(text: str) -> Any:
    """Parse the single JSON value in a model reply.

    Tries the (unfenced) reply as-is first, then the outermost {...} span for
    replies that wrap the object in prose.
    """
    cleaned = _strip_code_fence(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass
    match = _JSON_OBJECT_RE.search(cleaned)
    if match:
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError:
            pass
    raise LLMError(f"Claude response was not valid JSON: {cleaned[:300]}")


def _split_system(messages: List[Dict[str, str]]) -> tuple[Optional[str], List[Dict[str, str]]]:
    system: Optional[str] = None
    api_messages: List[Dict[str, str]] = []
    for msg in messages:
        if msg["role"] == "system":
            system = msg["content"]
        else:
            api_messages.append({"role": msg["role"], "content": msg["content"]})
    return system, api_messages


def claude_chat_text(messages: List[Dict[str, str]], max_tokens: Optional[int] = None) -> str:
    """
    Send a list of messages to Claude and return the first text block.

    A message with role "system" is lifted to Claude's top-level system param.
    Uses streaming with get_final_message() to avoid timeout issues on large inputs.

    Raises:
        LLMError: API key missing, API call failed, or no text in the reply.
    """
    if not settings.ANTHROPIC_API_KEY:
        raise LLMError("ANTHROPIC_API_KEY is required for LLM features")

    client = anthropic.Anthropic(api_key=settings.ANTHROPIC_API_KEY)
    system, api_messages = _split_system(messages)

    create_kwargs: Dict[str, Any] = {
        "model": settings.ANTHROPIC_MODEL,
        "max_tokens": max_tokens or settings.ANTHROPIC_MAX_TOKENS,
        "messages": api_messages,
    }
    if system:
        create_kwargs["system"] = system

    try:
        with client.messages.stream(**create_kwargs) as stream:
            response = stream.get_final_message()
    except anthropic.APIError as exc:
        raise LLMError(f"Claude API request failed: {exc}") from exc
    except UnicodeEncodeError as exc:
        raise LLMError(
            f"ANTHROPIC_API_KEY contains non-ASCII characters (e.g. an em dash instead of a hyphen). "
            f"Re-copy it from console.anthropic.com. Detail: {exc}"
        ) from exc

    for block in response.content:
        if block.type == "text":
            logger.debug(
                "Claude reply: %d chars, stop_reason=%s", len(block.text), response.stop_reason
            )
            return block.text

    raise LLMError("Claude response contained no text block")


def claude_chat_json(messages: List[Dict[str, str]], max_tokens: Optional[int] = None) -> Any:
    """Like claude_chat_text, but parses the reply as JSON (object or array)."""
    return parse_json_reply(claude_chat_text(messages, max_tokens=max_tokens))
