"""LiteLLM adapter - unified interface for the fallback model providers."""

import os
from pathlib import Path
from typing import Any

import litellm
import yaml
from litellm import acompletion

from wayfinder.core.logging import get_logger
from wayfinder.llm.base import LLMConfig, LLMResponse

logger = get_logger("llm.litellm_adapter")

# Disable LiteLLM's verbose logging
litellm.suppress_debug_info = True

DEFAULT_REGISTRY_PATH = Path(__file__).parent.parent / "configs" / "models.yaml"


class ModelConfig:
    """Model configuration from YAML."""

    def __init__(self, data: dict[str, Any]):
        self.model_id = data["model_id"]
        self.litellm_name = data["litellm_name"]
        self.provider = data["provider"]
        self.cost_per_1m_input = data.get("cost_per_1m_input", 0.0)
        self.cost_per_1m_output = data.get("cost_per_1m_output", 0.0)
        self.supports_json_mode = data.get("supports_json_mode", True)
        self.auth_env = data.get("auth_env")

    @property
    def api_key(self) -> str | None:
        """Get API key from environment."""
        if not self.auth_env:
            return None
        return os.getenv(self.auth_env)

    @property
    def is_available(self) -> bool:
        """Check if model is available (has required credentials)."""
        if self.auth_env and not self.api_key:
            return False
        return True


class ModelRegistry:
    """Load and manage model configurations from YAML."""

    def __init__(self, config_path: Path | str):
        with open(config_path) as f:
            data = yaml.safe_load(f)

        self.models = {m["model_id"]: ModelConfig(m) for m in data["models"]}

        available = [m.model_id for m in self.models.values() if m.is_available]
        logger.info(
            f"Loaded {len(self.models)} models from registry; "
            f"available: {', '.join(available) or 'none'}"
        )

    def get(self, model_id: str) -> ModelConfig | None:
        """Get model config by ID."""
        return self.models.get(model_id)


class LiteLLMAdapter:
    """Adapter for LiteLLM with registry-resolved credentials."""

    def __init__(self, registry: ModelRegistry):
        self.registry = registry

    def build_params(self, messages: list[dict], config: LLMConfig) -> dict[str, Any]:
        """Translate an LLMConfig into LiteLLM keyword arguments."""
        model_config = self.registry.get(config.model)
        if not model_config:
            raise ValueError(f"Model {config.model} not in registry")

        if not model_config.is_available:
            raise ValueError(
                f"Model {config.model} not available (missing credentials/config)"
            )

        if config.system_prompt:
            messages = [{"role": "system", "content": config.system_prompt}, *messages]

        params: dict[str, Any] = {
            "model": model_config.litellm_name,
            "messages": messages,
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
        }

        if model_config.api_key:
            params["api_key"] = model_config.api_key

        if config.json_mode and model_config.supports_json_mode:
            params["response_format"] = {"type": "json_object"}

        return params

    async def complete(self, messages: list[dict], config: LLMConfig) -> LLMResponse:
        """Call LiteLLM completion with the model named in ``config``."""
        params = self.build_params(messages, config)
        model_config = self.registry.get(config.model)

        logger.debug(
            f"LiteLLM request: model={params['model']}, messages={len(params['messages'])}"
        )

        try:
            response = await acompletion(**params)
        except Exception as e:
            logger.error(f"LiteLLM error for {config.model}: {e}")
            raise

        content = response.choices[0].message.content or ""

        usage = getattr(response, "usage", None)
        input_tokens = usage.prompt_tokens if usage else 0
        output_tokens = usage.completion_tokens if usage else 0

        cost_usd = (
            (input_tokens / 1_000_000) * model_config.cost_per_1m_input
            + (output_tokens / 1_000_000) * model_config.cost_per_1m_output
        )

        logger.debug(
            f"LiteLLM response: model={response.model}, "
            f"tokens={input_tokens}+{output_tokens}, "
            f"cost=${cost_usd:.4f}"
        )

        return LLMResponse(
            content=content,
            model=response.model,
            provider=model_config.provider,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            cost_usd=cost_usd,
        )


def create_adapter(config_path: Path | None = None) -> LiteLLMAdapter:
    """Create LiteLLM adapter with model registry."""
    config_path = config_path or DEFAULT_REGISTRY_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Model registry not found at {config_path}")

    return LiteLLMAdapter(ModelRegistry(config_path))
