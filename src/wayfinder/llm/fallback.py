"""Last-resort intent guess from a chat model."""

import json
import re
from typing import TYPE_CHECKING

from wayfinder.core.errors import UpstreamError
from wayfinder.core.logging import get_logger
from wayfinder.core.types import ActionResult
from wayfinder.llm.base import CompletionClient, LLMConfig

if TYPE_CHECKING:
    from wayfinder.core.config import Settings

logger = get_logger("llm.fallback")

SYSTEM_PROMPT = "Respond ONLY with valid JSON. No text or explanations."

PROMPT_TEMPLATE = """You are a reasoning agent for a 3D interactive world.
Current portal: "{portal}"
User said: "{transcript}"
Return JSON like: {{ "action": "<mesh>", "target": "<path or null>" }}
"""

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def build_prompt(portal: str, transcript: str) -> str:
    return PROMPT_TEMPLATE.format(portal=portal, transcript=transcript)


def strip_fences(content: str) -> str:
    """Remove markdown code-fence markers around a JSON reply."""
    return _FENCE.sub("", content).strip()


def parse_action(content: str) -> ActionResult:
    """
    Parse a model reply into an ActionResult.

    Raises:
        UpstreamError: If the reply is not a JSON object
    """
    cleaned = strip_fences(content)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise UpstreamError(f"Fallback returned invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise UpstreamError(f"Fallback returned {type(data).__name__}, expected object")

    action = data.get("action")
    target = data.get("target")
    return ActionResult(
        action=str(action).lower() if action else None,
        target=str(target) if target else None,
    )


class GenerativeFallback:
    """Ask a chat model for {action, target} when nothing else matched."""

    def __init__(
        self,
        client: CompletionClient,
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 256,
    ):
        self.client = client
        self.config = LLMConfig(
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            system_prompt=SYSTEM_PROMPT,
            json_mode=True,
        )

    async def suggest(self, portal: str, transcript: str) -> ActionResult:
        """Guess an action. No retries; every failure is an UpstreamError."""
        messages = [{"role": "user", "content": build_prompt(portal, transcript)}]

        try:
            response = await self.client.complete(messages, self.config)
        except UpstreamError:
            raise
        except Exception as e:
            logger.error(f"Fallback call failed: {e}")
            raise UpstreamError(str(e)) from e

        result = parse_action(response.content)
        logger.info(f"Fallback guess ({response.model}): {result.action!r} -> {result.target!r}")
        return result


def create_fallback(settings: "Settings") -> GenerativeFallback:
    """Fallback backed by LiteLLM and the packaged model registry."""
    from wayfinder.llm.litellm_adapter import create_adapter

    return GenerativeFallback(
        client=create_adapter(),
        model=settings.fallback_model,
        temperature=settings.fallback_temperature,
        max_tokens=settings.fallback_max_tokens,
    )
