"""
Salted one-way password hashing.

Hashes are stored as ``pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>``
so verification does not depend on the current iteration setting.
"""

import hashlib
import hmac
import secrets

ALGORITHM = "pbkdf2_sha256"
SALT_BYTES = 16


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def hash_password(password: str, iterations: int) -> str:
    """
    Hash a password with a fresh random salt.

    Args:
        password: Clear-text password
        iterations: PBKDF2 iteration count

    Returns:
        Encoded hash string
    """
    salt = secrets.token_bytes(SALT_BYTES)
    digest = _derive(password, salt, iterations)
    return f"{ALGORITHM}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """
    Check a clear-text password against an encoded hash.

    Malformed hashes never verify.
    """
    try:
        algorithm, iterations, salt_hex, digest_hex = encoded.split("$")
        if algorithm != ALGORITHM:
            return False
        digest = _derive(password, bytes.fromhex(salt_hex), int(iterations))
    except ValueError:
        return False
    return hmac.compare_digest(digest.hex(), digest_hex)
