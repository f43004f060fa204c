import base64
import os
from datetime import datetime, timedelta, timezone
from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from jose import JWTError, jwt

from .config import settings

HASH_SCHEME = "pbkdf2_sha256"
ACCESS_TOKEN = "access"
RESET_TOKEN = "reset"


def _kdf(salt: bytes, iterations: int) -> PBKDF2HMAC:
    return PBKDF2HMAC(algorithm=hashes.SHA256(), length=32, salt=salt, iterations=iterations)


def get_password_hash(password: str) -> str:
    """Hash a sign-in password as ``pbkdf2_sha256$<iterations>$<salt>$<digest>``."""
    iterations = settings.PASSWORD_HASH_ITERATIONS
    salt = os.urandom(16)
    digest = _kdf(salt, iterations).derive(password.encode("utf-8"))
    return "$".join([
        HASH_SCHEME,
        str(iterations),
        base64.b64encode(salt).decode("utf-8"),
        base64.b64encode(digest).decode("utf-8"),
    ])


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        scheme, iterations, salt_b64, digest_b64 = hashed_password.split("$")
    except ValueError:
        return False
    if scheme != HASH_SCHEME:
        return False
    kdf = _kdf(base64.b64decode(salt_b64), int(iterations))
    try:
        kdf.verify(password.encode("utf-8"), base64.b64decode(digest_b64))
    except InvalidKey:
        return False
    return True


def password_fingerprint(hashed_password: str) -> str:
    """Short tag of a stored hash; a reset token carrying it dies once the password changes."""
    return hashed_password.rsplit("$", 1)[-1][:16]


def create_access_token(subject: str, expires_minutes: int | None = None, purpose: str = ACCESS_TOKEN,
                        extra_claims: dict | None = None) -> str:
    if expires_minutes is None:
        expires_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    claims = {**(extra_claims or {}), "sub": subject, "exp": expire, "typ": purpose}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_claims(token: str, purpose: str = ACCESS_TOKEN) -> dict | None:
    """Claims of a valid, unexpired token of the given purpose, else None."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("typ") != purpose or payload.get("sub") is None:
        return None
    return payload


def decode_token(token: str, purpose: str = ACCESS_TOKEN) -> str | None:
    """Subject of a valid token of the given purpose, else None."""
    payload = decode_claims(token, purpose)
    return str(payload["sub"]) if payload is not None else None
