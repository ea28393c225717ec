"""
Password hashing utilities.
"""

from passlib.context import CryptContext

# pbkdf2_sha256 avoids passlib's broken bcrypt backend detection on bcrypt>=4.1
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its stored hash; malformed hashes never verify."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False
