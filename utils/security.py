"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT, one signing key per token purpose
- JTI generation for token identifiers
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Union

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError

from flask import current_app

ph = PasswordHasher()

ACCESS = "access"
REFRESH = "refresh"
RESET = "reset"

# purpose -> config key holding its signing secret
SECRET_KEYS: Dict[str, str] = {
    ACCESS: "JWT_SECRET",
    REFRESH: "REFRESH_TOKEN_SECRET",
    RESET: "RESET_TOKEN_SECRET",
}

# purpose -> config key holding the lifetime baked into the token (None: no exp claim)
TTL_KEYS: Dict[str, Optional[str]] = {
    ACCESS: "ACCESS_TOKEN_EXPIRES",
    REFRESH: None,
    RESET: "RESET_TOKEN_EXPIRES",
}

_DEFAULT_TTL = object()


class TokenVerificationError(Exception):
    """Base class for every reason a token is refused."""


class InvalidSignature(TokenVerificationError):
    pass


class TokenExpired(TokenVerificationError):
    pass


class MalformedToken(TokenVerificationError):
    pass


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2.
    A wrong password gives False; a malformed hash raises InvalidHashError.
    """
    try:
        return ph.verify(password_hash, password)
    except VerifyMismatchError:
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _secret_for(purpose: str) -> str:
    try:
        key = SECRET_KEYS[purpose]
    except KeyError:
        raise ValueError(f"Unknown token purpose: {purpose!r}")
    return current_app.config[key]


def issue_token(purpose: str, subject: str, ttl: Union[timedelta, None, object] = _DEFAULT_TTL) -> str:
    """
    Sign a token for `purpose` carrying `subject` as the sub claim.
    Without an explicit ttl the purpose default applies; refresh tokens get no exp.
    """
    secret = _secret_for(purpose)
    if ttl is _DEFAULT_TTL:
        ttl_key = TTL_KEYS[purpose]
        ttl = current_app.config[ttl_key] if ttl_key else None

    now = _now()
    payload = {
        "iss": current_app.config.get("JWT_ISSUER", "token-auth-api"),
        "sub": str(subject),
        "iat": int(now.timestamp()),
        "type": purpose,
        "jti": generate_jti(),
    }
    if ttl is not None:
        payload["exp"] = int((now + ttl).timestamp())
    return jwt.encode(payload, secret, algorithm=current_app.config["JWT_ALGORITHM"])


def verify_token(purpose: str, token: str) -> str:
    """
    Decode and validate a token against the key for `purpose`.
    Returns the subject id. Raises InvalidSignature, TokenExpired or MalformedToken.
    """
    secret = _secret_for(purpose)
    try:
        decoded = jwt.decode(
            token,
            secret,
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            options={"require": ["sub"], "verify_iat": False},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpired("Token expired")
    except jwt.InvalidSignatureError:
        raise InvalidSignature("Token signature verification failed")
    except jwt.InvalidTokenError as exc:
        raise MalformedToken(f"Invalid token: {exc}")

    if decoded.get("type") != purpose:
        raise InvalidSignature("Wrong token type")
    return decoded["sub"]
