"""OpenAI LLM adapter."""
from openai import AsyncOpenAI
from budgy.adapters.base import LLMAdapter
from budgy.config import settings


class OpenAIAdapter(LLMAdapter):
    """OpenAI API adapter."""

    def __init__(self, model_id: str = "gpt-4o-mini", **kwargs):
        super().__init__(model_id, **kwargs)
        api_key = kwargs.get("api_key") or settings.openai_api_key
        if not api_key:
            raise ValueError("OpenAI API key required")
        self.client = AsyncOpenAI(api_key=api_key)

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
    ) -> str:
        """Generate text using OpenAI API."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model_id,
                messages=[
                    {"role": "system", "content": "You are a friendly personal financial advisor."},
                    {"role": "user", "content": prompt}
                ],
                temperature=temperature,
            )
            return response.choices[0].message.content or ""
        except Exception as e:
            raise RuntimeError(f"OpenAI API error: {str(e)}")
