import re

_DISALLOWED = re.compile(r"[^a-zA-Z0-9_-]")


def derive_user_id(email: str) -> str:
    """Directory-safe user id: every character outside [A-Za-z0-9_-] becomes '_'."""
    return _DISALLOWED.sub("_", email)
