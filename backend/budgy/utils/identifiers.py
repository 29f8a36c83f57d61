"""Identifier helpers."""
import random
import string

LOCAL_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_local_id(length: int = 9) -> str:
    """Short random base-36 id for device-local records (the remote store assigns its own)."""
    return "".join(random.choices(LOCAL_ID_ALPHABET, k=length))
