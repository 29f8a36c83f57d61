"""Prompt templates for LLM interactions."""
from typing import List
from budgy.models.transaction import Transaction


class PromptBuilder:
    """Builds the financial insights prompt."""

    INSIGHTS_PROMPT_TEMPLATE = """Act as a personal financial advisor. Analyze the following list of transactions and provide a brief, actionable summary in 3 bullet points.
Focus on spending habits, pending liabilities, and potential savings. Keep it friendly and concise.

Transactions:
{transaction_data}"""

    def describe_transaction(self, tx: Transaction, currency: str) -> str:
        """One line per transaction, e.g. ``- 2024-01-15: Groceries (EXPENSE) $120.50 [COMPLETED] - Category: Food``."""
        return (
            f"- {tx.date.date().isoformat()}: {tx.title} ({tx.type.value}) "
            f"{currency}{tx.amount:.2f} [{tx.status.value}] - Category: {tx.category}"
        )

    def describe_transactions(self, transactions: List[Transaction], currency: str) -> List[str]:
        return [self.describe_transaction(tx, currency) for tx in transactions]

    def build_insights_prompt(self, descriptions: List[str]) -> str:
        """
        Build the advisor prompt.

        Args:
            descriptions: Output of ``describe_transactions``

        Returns:
            Prompt string
        """
        return self.INSIGHTS_PROMPT_TEMPLATE.format(
            transaction_data="\n".join(descriptions),
        )
