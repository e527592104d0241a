"""Temporary secret generation and policy checks.

Generated secrets: at least 12 characters with one lowercase, one
uppercase, one digit and one symbol, drawn from secrets.SystemRandom.
Secrets supplied by an administrator are checked against a looser
minimum length but the same four character classes.
"""

import secrets
import string

SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"
GENERATED_SECRET_LENGTH = 12
SUPPLIED_SECRET_MIN_LENGTH = 8

_rng = secrets.SystemRandom()


def generate_secret(length: int = GENERATED_SECRET_LENGTH) -> str:
    """Generate a secret with one character from each required class, then shuffle.

    Args:
        length: Total length; values below GENERATED_SECRET_LENGTH are raised to it.
    """
    length = max(length, GENERATED_SECRET_LENGTH)
    alphabet = string.ascii_letters + string.digits + SYMBOLS
    chars = [
        _rng.choice(string.ascii_lowercase),
        _rng.choice(string.ascii_uppercase),
        _rng.choice(string.digits),
        _rng.choice(SYMBOLS),
    ]
    chars.extend(_rng.choice(alphabet) for _ in range(length - len(chars)))
    _rng.shuffle(chars)
    return "".join(chars)


def policy_violations(secret: str, min_length: int) -> list[str]:
    """Return human-readable policy violations; empty list when the secret passes."""
    problems: list[str] = []
    if len(secret) < min_length:
        problems.append(f"must be at least {min_length} characters")
    if not any(c.islower() for c in secret):
        problems.append("must contain a lowercase letter")
    if not any(c.isupper() for c in secret):
        problems.append("must contain an uppercase letter")
    if not any(c.isdigit() for c in secret):
        problems.append("must contain a digit")
    if not any(not c.isalnum() and not c.isspace() for c in secret):
        problems.append("must contain a symbol")
    return problems


def meets_generated_policy(secret: str) -> bool:
    return not policy_violations(secret, GENERATED_SECRET_LENGTH)


def supplied_secret_violations(secret: str) -> list[str]:
    """Check a secret typed in by an administrator (bulk import sheet or form)."""
    if not secret or not secret.strip():
        return ["is required and cannot be empty"]
    return policy_violations(secret, SUPPLIED_SECRET_MIN_LENGTH)
