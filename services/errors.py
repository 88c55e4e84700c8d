"""
Domain errors raised by the auth service and the access guard.
Each carries the HTTP status and envelope code api.errors renders it with.
"""
from __future__ import annotations


class AuthError(Exception):
    status = 500
    code = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(AuthError):
    status = 400
    code = "BAD_REQUEST"
    default_message = "Missing or invalid fields"


class Conflict(AuthError):
    status = 409
    code = "CONFLICT"
    default_message = "Conflict"


class EmailTaken(Conflict):
    default_message = "Email already in use."


class InvalidCredentials(AuthError):
    status = 401
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials."


class InvalidOrExpiredToken(AuthError):
    status = 401
    code = "INVALID_OR_EXPIRED_TOKEN"
    default_message = "Invalid or expired token"


class VerificationFailed(AuthError):
    status = 403
    code = "VERIFICATION_FAILED"
    default_message = "Token verification failed"


class NotFound(AuthError):
    status = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class UserNotFound(NotFound):
    default_message = "User not found."


class Unauthorized(AuthError):
    status = 401
    code = "UNAUTHORIZED"
    default_message = "Authorization failed. No access token."


class Forbidden(AuthError):
    status = 403
    code = "FORBIDDEN"
    default_message = "Invalid token"
