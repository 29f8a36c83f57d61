"""Sign-up validation and user-facing auth error messages."""
import re
from typing import Dict, Optional
from budgy.exceptions import RemoteStoreError

SPECIAL_CHARACTERS = re.compile(r'[!@#$%^&*(),.?":{}|<>]')


def password_criteria(password: str) -> Dict[str, bool]:
    """Which of the password rules the candidate satisfies."""
    return {
        "length": len(password) >= 8,
        "upper": re.search(r"[A-Z]", password) is not None,
        "number": re.search(r"[0-9]", password) is not None,
        "special": SPECIAL_CHARACTERS.search(password) is not None,
    }


def validate_sign_up(password: str, confirm_password: str) -> Optional[str]:
    """Return an error message, or None when the password can be submitted."""
    if not all(password_criteria(password).values()):
        return "Please meet all password requirements."
    if password != confirm_password:
        return "Passwords do not match."
    return None


def friendly_auth_message(error: RemoteStoreError) -> str:
    """Translate a remote auth error into something a user can act on."""
    message = str(error).lower()
    if "rate limit" in message or "too many requests" in message or error.status == 429:
        if "email" in message:
            return "Too many attempts. Please check your email for a confirmation link or wait 60 seconds."
        return "Too many requests. Please wait a minute before trying again."
    if "invalid login credentials" in message:
        return "Invalid email or password. Please try again."
    if "email not confirmed" in message:
        return "Please confirm your email address before signing in."
    if "user already registered" in message:
        return "This email is already registered. Please sign in instead."
    return str(error) or "An error occurred during authentication."
