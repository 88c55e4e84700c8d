from __future__ import annotations
from functools import wraps
from flask import request
from services.errors import Forbidden, Unauthorized
from utils.security import ACCESS, TokenVerificationError, verify_token


def bearer_token(header: str | None) -> str | None:
    """Token part of an 'Authorization: Bearer <token>' header, or None."""
    if not header:
        return None
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def jwt_required():
    """
    Gate a view behind a valid access token.
    No token -> 401, token that fails verification -> 403.
    The verified subject id is passed to the view as `current_user_id`.
    The ledger is never consulted: access tokens are stateless.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = bearer_token(request.headers.get("Authorization"))
            if not token:
                raise Unauthorized()
            try:
                user_id = verify_token(ACCESS, token)
            except TokenVerificationError as e:
                raise Forbidden(str(e))

            kwargs["current_user_id"] = user_id
            return fn(*args, **kwargs)

        return wrapper

    return decorator
