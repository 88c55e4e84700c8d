"""
Authentication blueprint:
- POST /sign-up
- POST /sign-in
- POST /token
- POST /reset-password
- POST /reset-password/<token>

Request bodies are validated with marshmallow schemas before they reach
services.auth; failures surface through the error handlers in api.errors.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify

from models.schemas.user import (
    SignUpSchema,
    SignInSchema,
    RefreshRequestSchema,
    ResetRequestSchema,
    ResetConfirmSchema,
    UserOutSchema,
)
from services import auth as auth_service

bp = Blueprint("auth", __name__)

sign_up_schema = SignUpSchema()
sign_in_schema = SignInSchema()
refresh_request_schema = RefreshRequestSchema()
reset_request_schema = ResetRequestSchema()
reset_confirm_schema = ResetConfirmSchema()
user_out_schema = UserOutSchema()


def request_payload() -> dict:
    """JSON body, or the form fields of a urlencoded post."""
    return request.get_json(silent=True) or request.form.to_dict() or {}


@bp.post("/sign-up")
def sign_up():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password]
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Missing or invalid fields
      409:
        description: Email already in use
    """
    payload = request_payload()
    data = sign_up_schema.load(payload)

    user = auth_service.register(data["email"], data["password"])

    return jsonify(
        {
            "message": "User created successfully.",
            "data": user_out_schema.dump(user),
        }
    ), 201


@bp.post("/sign-in")
def sign_in():
    """
    Sign in: returns an access token and a refresh token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, password]
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns token and refreshToken)
      400:
        description: Missing fields
      401:
        description: Invalid credentials
    """
    payload = request_payload()
    data = sign_in_schema.load(payload)

    access_token, refresh_token = auth_service.authenticate(data["email"], data["password"])

    return jsonify(
        {
            "message": "User logged in successfully.",
            "token": access_token,
            "refreshToken": refresh_token,
        }
    ), 200


@bp.post("/token")
def token():
    """
    Exchange a refresh token for a new access token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [token]
           properties:
             token: { type: string, description: refresh token }
    responses:
      200:
        description: OK (returns accessToken)
      400:
        description: Missing token
      401:
        description: Unknown or expired refresh token
      403:
        description: Refresh token verification failed
    """
    payload = request_payload()
    data = refresh_request_schema.load(payload)

    access_token = auth_service.refresh_access_token(data["token"])

    return jsonify({"accessToken": access_token}), 200


@bp.post("/reset-password")
def request_reset():
    """
    Issue a password reset token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email]
           properties:
             email: { type: string }
    responses:
      200:
        description: OK (returns resetToken)
      400:
        description: Missing email
      404:
        description: No user with that email
    """
    payload = request_payload()
    data = reset_request_schema.load(payload)

    reset_token = auth_service.request_password_reset(data["email"])

    return jsonify(
        {
            "message": "Password reset token generated.",
            "resetToken": reset_token,
        }
    ), 200


@bp.post("/reset-password/<string:reset_token>")
def confirm_reset(reset_token: str):
    """
    Set a new password using a reset token (single use)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: path
         name: reset_token
         type: string
         required: true
      -  in: body
         name: body
         schema:
           type: object
           required: [password]
           properties:
             password: { type: string }
    responses:
      200:
        description: Password updated
      400:
        description: Missing password
      401:
        description: Unknown, used or expired reset token
      403:
        description: Reset token verification failed
      404:
        description: User no longer exists
    """
    payload = request_payload()
    data = reset_confirm_schema.load(payload)

    auth_service.confirm_password_reset(reset_token, data["password"])

    return jsonify({"message": "Password has been reset."}), 200
