"""
Auth service: sign-up, sign-in, access-token refresh, password reset and
account deletion.

Routes call these functions after schema validation; every business-rule
failure is raised as a services.errors.AuthError subclass. Persistence errors
propagate untouched and end up in the 500 handler.

Refresh and reset tokens are honored only when their signature verifies AND
their ledger row exists and has not expired. Access tokens are never written
to the ledger.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Tuple

from flask import current_app
from sqlalchemy.exc import IntegrityError

from models import storage
from models.base_model import utcnow
from models.user import User
from models.refresh_token import RefreshToken
from models.reset_token import ResetToken
from services.errors import (
    EmailTaken,
    InvalidCredentials,
    InvalidInput,
    InvalidOrExpiredToken,
    UserNotFound,
    VerificationFailed,
)
from utils.security import (
    ACCESS,
    REFRESH,
    RESET,
    TokenVerificationError,
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)

logger = logging.getLogger(__name__)

# Checked against when the email is unknown so both failure paths cost one argon2 verify
_DUMMY_HASH = hash_password("unknown-account-placeholder")


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def _find_user_by_email(email: str) -> Optional[User]:
    return storage.find_by(User, email=email)


def _live_ledger_entry(cls, token: Optional[str]):
    """Ledger row for token if present and unexpired, else InvalidOrExpiredToken."""
    entry = storage.find_by(cls, token=token) if token else None
    if entry is None or entry.expires_at <= utcnow():
        raise InvalidOrExpiredToken()
    return entry


def _verified_subject(purpose: str, token: str) -> str:
    try:
        return verify_token(purpose, token)
    except TokenVerificationError as exc:
        raise VerificationFailed(f"{purpose.capitalize()} token verification failed") from exc


def register(email: Optional[str], password: Optional[str]) -> User:
    """Create an account. Raises InvalidInput or EmailTaken."""
    email = normalize_email(email)
    if not email or not password:
        raise InvalidInput("email and password are required")

    if _find_user_by_email(email):
        raise EmailTaken()

    user = User(email=email, password_hash=hash_password(password))
    storage.new(user)
    try:
        storage.save()
    except IntegrityError:
        # Lost a race with a concurrent sign-up for the same address
        raise EmailTaken()

    logger.info("User registered: %s", user.id)
    return user


def authenticate(email: Optional[str], password: Optional[str]) -> Tuple[str, str]:
    """
    Check credentials and return (access_token, refresh_token).
    Unknown email and wrong password raise the same InvalidCredentials.
    """
    email = normalize_email(email)
    if not email or not password:
        raise InvalidInput("email and password are required")

    user = _find_user_by_email(email)
    password_hash = user.password_hash if user is not None else _DUMMY_HASH
    if not verify_password(password, password_hash) or user is None:
        logger.warning("Failed sign-in attempt")
        raise InvalidCredentials()

    access_token = issue_token(ACCESS, user.id)
    refresh_token = issue_token(REFRESH, user.id)
    storage.new(
        RefreshToken(
            token=refresh_token,
            user_id=user.id,
            expires_at=utcnow() + current_app.config["REFRESH_TOKEN_EXPIRES"],
        )
    )
    storage.save()

    logger.info("User signed in: %s", user.id)
    return access_token, refresh_token


def refresh_access_token(refresh_token: Optional[str]) -> str:
    """
    Exchange a refresh token for a new access token.
    The refresh token is not consumed; it stays usable until its ledger expiry.
    """
    if not refresh_token:
        raise InvalidInput("token is required")

    _live_ledger_entry(RefreshToken, refresh_token)
    subject = _verified_subject(REFRESH, refresh_token)
    return issue_token(ACCESS, subject)


def request_password_reset(email: Optional[str]) -> str:
    """Issue a single-use reset token for the account and record it in the ledger."""
    email = normalize_email(email)
    if not email:
        raise InvalidInput("email is required")

    user = _find_user_by_email(email)
    if not user:
        raise UserNotFound()

    reset_token = issue_token(RESET, user.id)
    storage.new(
        ResetToken(
            token=reset_token,
            user_id=user.id,
            expires_at=utcnow() + current_app.config["RESET_TOKEN_EXPIRES"],
        )
    )
    storage.save()

    logger.info("Password reset requested: %s", user.id)
    return reset_token


def confirm_password_reset(reset_token: Optional[str], new_password: Optional[str]) -> User:
    """
    Replace the account password using a reset token.

    The ledger row is removed with a compare-and-delete in the same commit as
    the password change. If the delete matches no row, a concurrent
    confirmation already consumed the token and nothing is written.
    """
    if not new_password:
        raise InvalidInput("password is required")

    entry = _live_ledger_entry(ResetToken, reset_token)
    subject = _verified_subject(RESET, reset_token)

    if subject != entry.user_id:
        raise VerificationFailed("Reset token does not belong to its ledger owner")
    user = storage.get(User, subject)
    if user is None:
        raise UserNotFound()

    new_hash = hash_password(new_password)

    if storage.delete_where(ResetToken, token=reset_token) == 0:
        storage.rollback()
        raise InvalidOrExpiredToken()
    user.password_hash = new_hash
    storage.new(user)
    storage.save()

    logger.info("Password reset completed: %s", user.id)
    return user


def delete_account(user_id: str) -> int:
    """
    Delete the user and every refresh token they hold; returns the number of
    refresh tokens removed. Outstanding reset tokens are left in the ledger.
    """
    user = storage.get(User, user_id)
    if user is None:
        raise UserNotFound()

    removed = storage.delete_where(RefreshToken, user_id=user.id)
    storage.delete(user)
    storage.save()

    logger.info("Account deleted: %s (%d refresh tokens revoked)", user_id, removed)
    return removed


def purge_expired_tokens(now: Optional[datetime] = None) -> Tuple[int, int]:
    """Delete expired refresh and reset ledger rows. Returns (refresh, reset) counts."""
    now = now or utcnow()
    refresh_count = storage.delete_expired(RefreshToken, now)
    reset_count = storage.delete_expired(ResetToken, now)
    storage.save()

    logger.info("Purged %d refresh and %d reset tokens", refresh_count, reset_count)
    return refresh_count, reset_count
