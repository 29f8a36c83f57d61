"""Base LLM adapter interface."""
from abc import ABC, abstractmethod


class LLMAdapter(ABC):
    """Abstract base class for LLM adapters."""

    def __init__(self, model_id: str, **kwargs):
        """
        Initialize the adapter.

        Args:
            model_id: Identifier for the model (e.g., "gemini-1.5-flash", "gpt-4o-mini")
            **kwargs: Additional provider-specific configuration
        """
        self.model_id = model_id
        self.config = kwargs

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
    ) -> str:
        """
        Generate free text for a prompt.

        Args:
            prompt: The prompt text
            temperature: Sampling temperature

        Returns:
            The model's answer (may be empty)
        """
        pass
