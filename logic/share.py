"""
Share code helpers.

Every gratitude gets a short random code so it can be linked to directly.
"""

import secrets
import string

SHORT_CODE_ALPHABET = string.ascii_letters + string.digits + "_-"
SHORT_CODE_SIZE = 10


def generate_short_code(size: int = SHORT_CODE_SIZE) -> str:
    """Generate a URL-safe random share code.

    Args:
        size: Number of characters (default 10).

    Returns:
        Code drawn from the 64-character URL-safe alphabet.
    """
    return "".join(secrets.choice(SHORT_CODE_ALPHABET) for _ in range(size))


def build_share_link(base_url: str, code: str) -> str:
    """Build the public link for a share code."""
    return f"{base_url.rstrip('/')}/share/{code}"
