"""Password hashing — argon2id, with legacy scrypt verification.

New hashes are always argon2id via ``argon2-cffi``. Hashes in the older
``$scrypt$`` PHC format still verify, and ``needs_rehash`` reports them so
an account can upgrade its stored hash after a successful login.

Usage::

    from latch.security.passwords import hash_password, verify_password

    hashed = hash_password("my-password")
    ok = verify_password("my-password", hashed)
"""

import base64
import hashlib
import hmac

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

# PHC format prefixes
_ARGON2_PREFIX = "$argon2"
_SCRYPT_PREFIX = "$scrypt$"

_hasher = PasswordHasher()


# ---------------------------------------------------------------------------
# Scrypt (legacy, verify only)
# ---------------------------------------------------------------------------


def _verify_scrypt(password: str, phc_hash: str) -> bool:
    """Verify password against a scrypt PHC-format hash."""
    # Format: $scrypt$n=N,r=R,p=P$salt_b64$dk_b64
    parts = phc_hash.split("$")
    if len(parts) != 5 or parts[1] != "scrypt":
        return False

    try:
        params = {}
        for param in parts[2].split(","):
            key, _, value = param.partition("=")
            params[key] = int(value)

        salt = base64.b64decode(parts[3])
        expected_dk = base64.b64decode(parts[4])
        dk = hashlib.scrypt(
            password.encode("utf-8"),
            salt=salt,
            n=params["n"],
            r=params["r"],
            p=params["p"],
            dklen=len(expected_dk),
        )
    except (KeyError, ValueError):
        return False

    return hmac.compare_digest(dk, expected_dk)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    """Hash a password with argon2id.

    Returns a PHC-format string safe for database storage.
    """
    if not password:
        msg = "Password must not be empty."
        raise ValueError(msg)
    return _hasher.hash(password)


def verify_password(password: str, phc_hash: str) -> bool:
    """Verify a password against a PHC-format hash.

    Auto-detects argon2 or legacy scrypt from the hash prefix.

    Returns:
        ``True`` if the password matches, ``False`` otherwise.
    """
    if not password or not phc_hash:
        return False

    if phc_hash.startswith(_ARGON2_PREFIX):
        try:
            return _hasher.verify(phc_hash, password)
        except (VerificationError, InvalidHashError):
            return False

    if phc_hash.startswith(_SCRYPT_PREFIX):
        return _verify_scrypt(password, phc_hash)

    msg = f"Unknown hash format: {phc_hash[:20]}..."
    raise ValueError(msg)


def needs_rehash(phc_hash: str) -> bool:
    """True when *phc_hash* is legacy scrypt or uses outdated argon2 parameters."""
    if not phc_hash.startswith(_ARGON2_PREFIX):
        return True
    return _hasher.check_needs_rehash(phc_hash)
