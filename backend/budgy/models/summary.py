"""Aggregate and view response models."""
from datetime import date
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field
from budgy.models.session import SessionMode
from budgy.models.transaction import Transaction, TransactionType


class DetailCategory(str, Enum):
    """Bucket selected in the detail view."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    PENDING = "PENDING"


class Financials(BaseModel):
    """Dashboard aggregates over the whole transaction set."""

    income: float = 0.0
    expense: float = 0.0
    pending: float = Field(default=0.0, description="Pending expenses only")
    balance: float = 0.0


class CategoryTotal(BaseModel):
    """Completed expense total for one category."""

    name: str
    value: float


class DashboardSummary(BaseModel):
    """Everything the dashboard shows."""

    name: str
    currency: str
    monthly_budget: float
    percent_spent: float
    financials: Financials
    breakdown: List[CategoryTotal] = Field(default_factory=list)
    transactions: List[Transaction] = Field(default_factory=list)
    mode: SessionMode
    syncing: bool = False
    loading: bool = False


class DetailView(BaseModel):
    """Month/category filtered listing."""

    category: DetailCategory
    month: date = Field(..., description="First day of the selected month")
    transactions: List[Transaction] = Field(default_factory=list)
    total: float = 0.0


class CategoryLists(BaseModel):
    """The user's expense and income category lists."""

    expense: List[str] = Field(default_factory=list)
    income: List[str] = Field(default_factory=list)


class CategoryCreate(BaseModel):
    """Request to add a category."""

    type: TransactionType
    name: str


class CategoryRename(BaseModel):
    """Request to rename the category at an index."""

    type: TransactionType
    index: int = Field(..., ge=0)
    name: str


class InsightsResponse(BaseModel):
    """Language-model generated summary of the transaction set."""

    text: str
    model_id: Optional[str] = None
