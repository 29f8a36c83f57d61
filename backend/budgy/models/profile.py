"""User profile and preference models."""
from enum import Enum
from pydantic import BaseModel, Field
from budgy.config import settings


class Theme(str, Enum):
    """Display theme preference."""

    DARK = "dark"
    LIGHT = "light"


class Currency(BaseModel):
    """A selectable display currency."""

    symbol: str
    code: str
    name: str


CURRENCIES = [
    Currency(symbol="₹", code="INR", name="Indian Rupee"),
    Currency(symbol="$", code="USD", name="US Dollar"),
    Currency(symbol="€", code="EUR", name="Euro"),
    Currency(symbol="£", code="GBP", name="British Pound"),
    Currency(symbol="AED", code="AED", name="UAE Dirham"),
    Currency(symbol="¥", code="JPY", name="Japanese Yen"),
]


class UserProfile(BaseModel):
    """Profile settings shown on the dashboard."""

    name: str = Field(default_factory=lambda: settings.default_profile_name)
    currency: str = Field(default_factory=lambda: settings.default_currency, description="Display symbol")
    monthly_budget: float = Field(
        default_factory=lambda: settings.default_monthly_budget,
        ge=0.0,
        description="Monthly spending budget",
    )

    @classmethod
    def from_remote(cls, row: dict) -> "UserProfile":
        """Build a profile from a remote ``profiles`` row, falling back to defaults for empty fields."""
        return cls(
            name=row.get("name") or settings.default_profile_name,
            currency=row.get("currency") or settings.default_currency,
            monthly_budget=row.get("monthly_budget") or settings.default_monthly_budget,
        )

    def to_remote(self, user_id: str) -> dict:
        """Row shape stored in the remote ``profiles`` collection."""
        return {
            "id": user_id,
            "name": self.name,
            "currency": self.currency,
            "monthly_budget": self.monthly_budget,
        }


class ProfileNameUpdate(BaseModel):
    """Request to rename the profile."""

    name: str


class SettingsUpdate(BaseModel):
    """Request to change budget and currency."""

    monthly_budget: float = Field(..., description="Must be greater than zero")
    currency: str = Field(..., min_length=1)
