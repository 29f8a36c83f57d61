"""Transaction data models."""
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class TransactionType(str, Enum):
    """Direction of money flow."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class TransactionStatus(str, Enum):
    """Settlement state of a transaction."""

    COMPLETED = "COMPLETED"
    PENDING = "PENDING"


class Transaction(BaseModel):
    """Transaction model."""

    id: Optional[str] = None
    title: str = Field(..., description="Free-text label")
    amount: float = Field(..., ge=0.0, description="Non-negative amount, currency comes from the profile")
    type: TransactionType
    status: TransactionStatus = TransactionStatus.COMPLETED
    category: str = Field(..., description="Category label for the transaction type")
    date: datetime = Field(..., description="When the transaction happens (may be in the future)")
    user_id: Optional[str] = Field(None, description="Owner identity, empty for device-local records")
    sync_batch: Optional[str] = Field(None, description="Reconciliation batch that uploaded this record")

    class Config:
        json_schema_extra = {
            "example": {
                "id": "k3j9x0qpa",
                "title": "Grocery Shopping",
                "amount": 120.50,
                "type": "EXPENSE",
                "status": "COMPLETED",
                "category": "Food & Dining",
                "date": "2024-01-15T10:30:00",
            }
        }


class TransactionCreate(BaseModel):
    """Transaction creation model (id and owner are assigned by the store)."""

    title: str = Field(..., min_length=1, description="Free-text label")
    amount: float = Field(..., ge=0.0, description="Non-negative amount")
    type: TransactionType = TransactionType.EXPENSE
    status: TransactionStatus = TransactionStatus.COMPLETED
    category: str = Field(..., min_length=1, description="Category label")
    date: Optional[datetime] = Field(None, description="Defaults to now when omitted")
