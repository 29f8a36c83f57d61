from .privacy import obfuscate_title, obfuscate_email, obfuscate_transactions
from .identifiers import generate_local_id
from .timestamp import to_local, month_start, month_bounds, shift_month, parse_month

__all__ = [
    "obfuscate_title",
    "obfuscate_email",
    "obfuscate_transactions",
    "generate_local_id",
    "to_local",
    "month_start",
    "month_bounds",
    "shift_month",
    "parse_month",
]
