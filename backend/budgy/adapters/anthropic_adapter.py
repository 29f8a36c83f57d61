"""Anthropic Claude LLM adapter."""
from anthropic import AsyncAnthropic
from budgy.adapters.base import LLMAdapter
from budgy.config import settings


class AnthropicAdapter(LLMAdapter):
    """Anthropic Claude API adapter."""

    def __init__(self, model_id: str = "claude-3-5-haiku-latest", **kwargs):
        super().__init__(model_id, **kwargs)
        api_key = kwargs.get("api_key") or settings.anthropic_api_key
        if not api_key:
            raise ValueError("Anthropic API key required")
        self.client = AsyncAnthropic(api_key=api_key)

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
    ) -> str:
        """Generate text using Anthropic API."""
        try:
            response = await self.client.messages.create(
                model=self.model_id,
                max_tokens=600,
                temperature=temperature,
                messages=[
                    {"role": "user", "content": prompt}
                ],
            )
            return "".join(block.text for block in response.content if getattr(block, "text", None))
        except Exception as e:
            raise RuntimeError(f"Anthropic API error: {str(e)}")
