"""Factory for creating LLM adapters."""
from budgy.adapters.base import LLMAdapter
from budgy.adapters.mock import MockLLMAdapter
from budgy.adapters.openai_adapter import OpenAIAdapter
from budgy.adapters.anthropic_adapter import AnthropicAdapter
from budgy.adapters.gemini_adapter import GeminiAdapter


def get_llm_adapter(model_id: str, **kwargs) -> LLMAdapter:
    """
    Factory function to create appropriate LLM adapter based on model_id.

    Args:
        model_id: Model identifier (e.g., "mock:advisor", "gpt-4o-mini", "claude-3-5-haiku-latest", "gemini-1.5-flash")
        **kwargs: Additional configuration for the adapter

    Returns:
        LLMAdapter instance

    Raises:
        ValueError: If the provider's API key is not configured
    """
    if model_id.startswith("mock:"):
        return MockLLMAdapter(model_id, **kwargs)
    elif model_id.startswith("gpt-") or model_id.startswith("o1-") or "openai" in model_id.lower():
        return OpenAIAdapter(model_id, **kwargs)
    elif "claude" in model_id.lower() or "anthropic" in model_id.lower():
        return AnthropicAdapter(model_id, **kwargs)
    elif "gemini" in model_id.lower() or "google" in model_id.lower():
        return GeminiAdapter(model_id, **kwargs)
    else:
        # Default to mock for unknown models
        return MockLLMAdapter(f"mock:{model_id}", **kwargs)
