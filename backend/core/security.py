"""
Credential helpers: password hashing, strength rules, reset tokens.
"""

import re
import secrets
from typing import List, Optional

import bcrypt

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Fields that never leave the auth/profile services
PRIVATE_USER_FIELDS = ("password", "resetToken", "resetTokenExpiry")


def get_password_hash(password: str, rounds: int = 10) -> str:
    # Bcrypt has a 72 byte limit
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        # not a bcrypt hash
        return False


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_RE.match(email) is not None


def password_strength_errors(password: str) -> List[str]:
    errors = []
    if len(password) < 8:
        errors.append("Password must be at least 8 characters")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain uppercase letter")
    if not re.search(r"[0-9]", password):
        errors.append("Password must contain number")
    return errors


def generate_reset_token() -> str:
    return secrets.token_hex(32)


def public_user(user: dict) -> dict:
    """User document without credentials"""
    return {k: v for k, v in user.items() if k not in PRIVATE_USER_FIELDS}
