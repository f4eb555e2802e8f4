"""
Password hashing with bcrypt.

Each hash embeds its own salt and cost factor, so verification needs nothing
but the stored string.
"""
import bcrypt

from app.core import config
from app.utils import get_logger


log = get_logger(__name__)


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash string
    """
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify password against hash.

    bcrypt compares in constant time. A stored value that is not a bcrypt
    hash never verifies.

    Args:
        plain_password: Plain text password
        hashed_password: Bcrypt hash

    Returns:
        True if password matches, False otherwise
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8")
        )
    except ValueError as e:
        log.error(f"Password verification error: {e}")
        return False
