"""Privacy utilities for obfuscating sensitive data in logs."""
import re
from typing import List
from budgy.models.transaction import Transaction


def obfuscate_title(title: str) -> str:
    """
    Obfuscate a transaction title.
    Replaces alphanumeric characters with asterisks, preserves structure.
    """
    return re.sub(r'[A-Za-z0-9]', '*', title)


def obfuscate_email(email: str) -> str:
    """Keep the first character and the domain of an email address."""
    local, _, domain = email.partition("@")
    if not domain:
        return obfuscate_title(email)
    return f"{local[:1]}***@{domain}"


def obfuscate_transactions(transactions: List[Transaction]) -> List[dict]:
    """
    Obfuscate transaction data for logging.
    Returns a list of dictionaries with obfuscated titles.
    """
    return [
        {
            "date": str(tx.date),
            "amount": tx.amount,
            "type": tx.type.value,
            "status": tx.status.value,
            "title": obfuscate_title(tx.title),
            "category": tx.category,
        }
        for tx in transactions
    ]
