from __future__ import annotations

from flask import Blueprint, jsonify

from services import auth as auth_service
from utils.decorators import jwt_required

bp = Blueprint("users", __name__)


@bp.delete("/delete-user")
@jwt_required()
def delete_user(current_user_id: str):
    """
    Delete the signed-in account and revoke its refresh tokens
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: Account deleted
      401:
        description: No access token
      403:
        description: Invalid access token
      404:
        description: Account already deleted
    """
    auth_service.delete_account(current_user_id)
    return jsonify({"message": "User deleted successfully."}), 200


@bp.get("/protected")
@jwt_required()
def protected(current_user_id: str):
    """
    Example protected route
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: No access token
      403:
        description: Invalid access token
    """
    return jsonify(
        {
            "message": "This is a protected route",
            "user": {"userId": current_user_id},
        }
    ), 200
