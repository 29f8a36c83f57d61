from .transaction import Transaction, TransactionCreate, TransactionType, TransactionStatus
from .profile import UserProfile, ProfileNameUpdate, SettingsUpdate, Theme, Currency, CURRENCIES
from .session import SessionMode, Session, Credentials, SignUpRequest, AuthResponse
from .summary import (
    DetailCategory,
    Financials,
    CategoryTotal,
    DashboardSummary,
    DetailView,
    CategoryLists,
    CategoryCreate,
    CategoryRename,
    InsightsResponse,
)

__all__ = [
    "Transaction",
    "TransactionCreate",
    "TransactionType",
    "TransactionStatus",
    "UserProfile",
    "ProfileNameUpdate",
    "SettingsUpdate",
    "Theme",
    "Currency",
    "CURRENCIES",
    "SessionMode",
    "Session",
    "Credentials",
    "SignUpRequest",
    "AuthResponse",
    "DetailCategory",
    "Financials",
    "CategoryTotal",
    "DashboardSummary",
    "DetailView",
    "CategoryLists",
    "CategoryCreate",
    "CategoryRename",
    "InsightsResponse",
]
