"""
Credential manager - Password hashing and verification token generation.

Passwords are hashed with bcrypt (salted, fixed work factor) and checked
with bcrypt's own constant-time comparison. Verification tokens are
32 random bytes from the secrets module, hex encoded.
"""

import secrets

import bcrypt

DEFAULT_ROUNDS = 12
TOKEN_BYTES = 32

# bcrypt only uses the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode()[:_BCRYPT_MAX_BYTES]


class CredentialManager:
    """Hashes and verifies passwords, issues verification tokens."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        """
        Initialize with the bcrypt work factor.

        Args:
            rounds: bcrypt cost factor (4-31)
        """
        self._rounds = rounds
        # Compared against when an email is unknown, so that login costs
        # one bcrypt check whether or not the account exists.
        self._dummy_hash = bcrypt.hashpw(
            b"dummy_password_for_timing_safety", bcrypt.gensalt(rounds)
        )

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash_password(self, password: str) -> str:
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self._rounds)).decode()

    def verify_password(self, password: str, password_hash: str) -> bool:
        """
        Check a plaintext password against a stored bcrypt hash.

        A malformed hash is treated as a mismatch.
        """
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode())
        except ValueError:
            return False

    def verify_dummy(self, password: str) -> bool:
        """Burn one bcrypt check for an unknown account. Always False."""
        bcrypt.checkpw(_encode(password), self._dummy_hash)
        return False

    def generate_token(self) -> str:
        return secrets.token_hex(TOKEN_BYTES)
