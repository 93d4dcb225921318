"""Password hashing with bcrypt."""

import bcrypt

COST = 14
_MAX_PASSWORD_BYTES = 72


class PasswordMismatchError(ValueError):
    """The password does not match the stored hash."""


def hash_bcrypt(password: str) -> str:
    """Hash a password with bcrypt at cost 14."""
    raw = password.encode("utf-8")
    if len(raw) > _MAX_PASSWORD_BYTES:
        raise ValueError("bcrypt: password length exceeds 72 bytes")
    salt = bcrypt.gensalt(rounds=COST, prefix=b"2a")
    return bcrypt.hashpw(raw, salt).decode("ascii")


def compare_hash(hashed: str, payload: str) -> None:
    """Check a password against a bcrypt hash.

    Raises PasswordMismatchError on mismatch and ValueError for a malformed hash.
    """
    raw = payload.encode("utf-8")[:_MAX_PASSWORD_BYTES]
    try:
        matches = bcrypt.checkpw(raw, hashed.encode("utf-8"))
    except ValueError as exc:
        raise ValueError(f"bcrypt: invalid hash: {exc}") from exc
    if not matches:
        raise PasswordMismatchError(
            "bcrypt: hashedPassword is not the hash of the given password"
        )