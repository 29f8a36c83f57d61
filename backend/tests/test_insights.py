"""Tests for the insights summary and its fallbacks."""
from datetime import datetime
import pytest
from budgy.config import settings
from budgy.models.transaction import TransactionStatus
from budgy.services.insights import (
    EMPTY_MESSAGE,
    FAILURE_MESSAGE,
    UNAVAILABLE_MESSAGE,
    InsightsService,
)
from budgy.services.prompts import PromptBuilder
from tests.conftest import make_transaction


def test_describe_transaction():
    tx = make_transaction(
        120.5,
        status=TransactionStatus.PENDING,
        category="Food & Dining",
        date=datetime(2024, 1, 15, 18, 30),
        title="Groceries",
    )

    line = PromptBuilder().describe_transaction(tx, "$")

    assert line == "- 2024-01-15: Groceries (EXPENSE) $120.50 [PENDING] - Category: Food & Dining"


@pytest.mark.asyncio
async def test_prompt_lists_every_transaction():
    service = InsightsService("mock:echo")
    transactions = [make_transaction(10.0, title="Coffee"), make_transaction(20.0, title="Lunch")]

    prompt = await service.summarize_transactions(transactions, "₹")

    assert prompt.startswith("Act as a personal financial advisor.")
    assert "Coffee (EXPENSE) ₹10.00" in prompt
    assert "Lunch (EXPENSE) ₹20.00" in prompt


@pytest.mark.asyncio
async def test_advisor_answer():
    text = await InsightsService("mock:advisor").summarize(["- 2024-01-01: Rent"])
    assert text.count("\n") == 2


@pytest.mark.asyncio
async def test_failure_returns_fallback():
    assert await InsightsService("mock:fail").summarize([]) == FAILURE_MESSAGE


@pytest.mark.asyncio
async def test_empty_answer_returns_fallback():
    assert await InsightsService("mock:empty").summarize([]) == EMPTY_MESSAGE


@pytest.mark.asyncio
async def test_missing_key_returns_unavailable(monkeypatch):
    monkeypatch.setattr(settings, "google_api_key", "")

    assert await InsightsService("gemini-1.5-flash").summarize([]) == UNAVAILABLE_MESSAGE
