"""
Token hashing utilities.

Refresh tokens are stored as SHA-256 hashes, never in plain form.
"""

import hashlib


def hash_token(token: str) -> str:
    """
    Create a SHA-256 hash of a token for secure storage.

    Args:
        token: The plain token string

    Returns:
        Hex-encoded SHA-256 hash
    """
    return hashlib.sha256(token.encode()).hexdigest()
