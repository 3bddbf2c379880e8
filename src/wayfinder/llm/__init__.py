"""
LLM module - generative fallback for utterances no rule understood.

- base: request/response structures
- litellm_adapter: model registry (configs/models.yaml) + LiteLLM calls
- fallback: prompt building and action parsing
"""
