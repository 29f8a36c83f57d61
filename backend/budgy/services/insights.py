"""Language-model summary of the user's transactions."""
import logging
from typing import List, Optional
from budgy.adapters.factory import get_llm_adapter
from budgy.config import settings
from budgy.models.transaction import Transaction
from budgy.services.prompts import PromptBuilder
from budgy.utils.privacy import obfuscate_transactions

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "AI service unavailable. API Key missing."
EMPTY_MESSAGE = "Unable to generate insights at this time."
FAILURE_MESSAGE = "Sorry, I couldn't analyze your finances right now. Please try again later."


class InsightsService:
    """Asks the configured model for a short advisory summary. Never raises."""

    def __init__(self, model_id: Optional[str] = None):
        self.model_id = model_id or settings.insights_model
        self.prompt_builder = PromptBuilder()

    async def summarize(self, descriptions: List[str]) -> str:
        """
        Summarize pre-formatted transaction descriptions.

        Args:
            descriptions: One text line per transaction

        Returns:
            The model's answer, or a fixed fallback message when the service
            is unconfigured, unreachable or returns nothing
        """
        try:
            adapter = get_llm_adapter(self.model_id)
        except ValueError as e:
            logger.warning("Insights model %s not configured: %s", self.model_id, e)
            return UNAVAILABLE_MESSAGE

        prompt = self.prompt_builder.build_insights_prompt(descriptions)
        try:
            text = await adapter.complete(prompt)
        except Exception as e:
            logger.error("Error generating insights: %s", e)
            return FAILURE_MESSAGE

        text = (text or "").strip()
        return text or EMPTY_MESSAGE

    async def summarize_transactions(self, transactions: List[Transaction], currency: str) -> str:
        logger.debug("Requesting insights for %s", obfuscate_transactions(transactions))
        descriptions = self.prompt_builder.describe_transactions(transactions, currency)
        return await self.summarize(descriptions)
