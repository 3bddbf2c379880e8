"""Tests for the generative fallback."""

from unittest.mock import AsyncMock

import pytest

from wayfinder.core.errors import UpstreamError
from wayfinder.llm.base import LLMResponse
from wayfinder.llm.fallback import (
    SYSTEM_PROMPT,
    GenerativeFallback,
    build_prompt,
    parse_action,
    strip_fences,
)


def _response(content: str) -> LLMResponse:
    return LLMResponse(content=content, model="test-model", provider="test")


@pytest.fixture
def client():
    return AsyncMock()


@pytest.fixture
def fallback(client):
    return GenerativeFallback(client, model="gpt-4o-mini")


def test_build_prompt_includes_context():
    prompt = build_prompt("meet-joz", "Open The Door")
    assert 'Current portal: "meet-joz"' in prompt
    assert 'User said: "Open The Door"' in prompt
    assert '"action": "<mesh>"' in prompt


def test_strip_fences():
    assert strip_fences('```json\n{"action": "door"}\n```') == '{"action": "door"}'
    assert strip_fences('```\n{"action": "door"}\n```') == '{"action": "door"}'
    assert strip_fences('{"action": "door"}') == '{"action": "door"}'


class TestParseAction:
    def test_lowercases_action(self):
        result = parse_action('{"action": "Door", "target": "/hall"}')
        assert result.to_dict() == {"action": "door", "target": "/hall"}

    def test_fenced(self):
        result = parse_action('```json\n{"action": "lamp", "target": null}\n```')
        assert result.to_dict() == {"action": "lamp", "target": None}

    def test_missing_fields_become_null(self):
        assert parse_action("{}").to_dict() == {"action": None, "target": None}

    def test_non_json(self):
        with pytest.raises(UpstreamError, match="invalid JSON"):
            parse_action("I think you want the door.")

    def test_fenced_but_invalid(self):
        with pytest.raises(UpstreamError):
            parse_action("```json\n{action: door}\n```")

    def test_non_object(self):
        with pytest.raises(UpstreamError, match="expected object"):
            parse_action('["door"]')


async def test_suggest_uses_json_mode_config(fallback, client):
    client.complete.return_value = _response('{"action": "DOOR", "target": "/hall"}')

    result = await fallback.suggest("root", "open the door")

    assert result.action == "door"
    assert result.target == "/hall"
    messages, config = client.complete.await_args.args
    assert messages == [{"role": "user", "content": build_prompt("root", "open the door")}]
    assert config.model == "gpt-4o-mini"
    assert config.temperature == 0.0
    assert config.json_mode
    assert config.system_prompt == SYSTEM_PROMPT


async def test_suggest_transport_error(fallback, client):
    client.complete.side_effect = RuntimeError("connection reset")
    with pytest.raises(UpstreamError, match="connection reset"):
        await fallback.suggest("root", "open the door")
    assert client.complete.await_count == 1  # no retries


async def test_suggest_parse_error(fallback, client):
    client.complete.return_value = _response("sorry, no idea")
    with pytest.raises(UpstreamError):
        await fallback.suggest("root", "open the door")
