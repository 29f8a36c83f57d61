"""Mock LLM adapter for testing without API calls."""
from budgy.adapters.base import LLMAdapter


class MockLLMAdapter(LLMAdapter):
    """Mock LLM adapter that returns deterministic responses based on model_id."""

    MODEL_RESPONSES = {
        "mock:advisor": (
            "- Most of your spending goes to everyday essentials; keep an eye on dining out.\n"
            "- You have pending bills coming up, set the money aside now.\n"
            "- Moving a small fixed amount to savings each payday would build a buffer."
        ),
        "mock:empty": "",
    }

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
    ) -> str:
        """Return the canned answer for this model id."""
        if self.model_id == "mock:fail":
            raise RuntimeError("Mock LLM failure")
        if self.model_id == "mock:echo":
            return prompt
        return self.MODEL_RESPONSES.get(self.model_id, self.MODEL_RESPONSES["mock:advisor"])
