"""
HTTP-level tests for the auth routes: status codes, response bodies and
the error envelope.
"""

from models import storage
from models.reset_token import ResetToken


def sign_up(client, email="a@x.com", password="pw123"):
    return client.post("/sign-up", json={"email": email, "password": password})


def sign_in(client, email="a@x.com", password="pw123"):
    return client.post("/sign-in", json={"email": email, "password": password})


class TestSignUp:

    def test_created(self, client):
        response = sign_up(client)
        assert response.status_code == 201

        data = response.get_json()
        assert data["message"] == "User created successfully."
        assert data["data"]["email"] == "a@x.com"
        assert "password" not in data["data"]
        assert "password_hash" not in data["data"]

    def test_missing_fields(self, client):
        response = client.post("/sign-up", json={"email": "a@x.com"})
        assert response.status_code == 400

        data = response.get_json()
        assert data["error"] == "VALIDATION_ERROR"
        assert data["status"] == 400
        assert "password" in data["details"]

    def test_no_body(self, client):
        response = client.post("/sign-up")
        assert response.status_code == 400

    def test_form_encoded_body(self, client):
        response = client.post("/sign-up", data={"email": "form@x.com", "password": "pw123"})
        assert response.status_code == 201

        response = client.post("/sign-in", data={"email": "form@x.com", "password": "pw123"})
        assert response.status_code == 200
        assert response.get_json()["refreshToken"]

    def test_email_taken(self, client):
        sign_up(client)
        response = sign_up(client, email="A@X.com", password="different")
        assert response.status_code == 409
        assert response.get_json()["error"] == "CONFLICT"


class TestSignIn:

    def test_returns_both_tokens(self, client):
        sign_up(client)
        response = sign_in(client)
        assert response.status_code == 200

        data = response.get_json()
        assert data["token"]
        assert data["refreshToken"]
        assert data["token"] != data["refreshToken"]

    def test_wrong_password_and_unknown_email_look_the_same(self, client):
        sign_up(client)
        wrong_password = sign_in(client, password="wrong")
        unknown_email = sign_in(client, email="nobody@x.com")

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.get_json() == unknown_email.get_json()
        assert wrong_password.get_json()["error"] == "INVALID_CREDENTIALS"

    def test_missing_fields(self, client):
        response = client.post("/sign-in", json={"password": "pw123"})
        assert response.status_code == 400


class TestTokenRefresh:

    def test_exchange_refresh_token(self, client):
        sign_up(client)
        refresh_token = sign_in(client).get_json()["refreshToken"]

        response = client.post("/token", json={"token": refresh_token})
        assert response.status_code == 200
        access_token = response.get_json()["accessToken"]

        protected = client.get("/protected", headers={"Authorization": f"Bearer {access_token}"})
        assert protected.status_code == 200

    def test_missing_token(self, client):
        response = client.post("/token", json={})
        assert response.status_code == 400

    def test_unknown_token(self, client):
        response = client.post("/token", json={"token": "never-issued"})
        assert response.status_code == 401
        assert response.get_json()["error"] == "INVALID_OR_EXPIRED_TOKEN"

    def test_access_token_is_not_a_refresh_token(self, client):
        sign_up(client)
        access_token = sign_in(client).get_json()["token"]

        response = client.post("/token", json={"token": access_token})
        assert response.status_code == 401


class TestPasswordReset:

    def test_full_reset_flow(self, client):
        sign_up(client)
        response = client.post("/reset-password", json={"email": "a@x.com"})
        assert response.status_code == 200
        reset_token = response.get_json()["resetToken"]

        response = client.post(f"/reset-password/{reset_token}", json={"password": "new-pw"})
        assert response.status_code == 200

        assert sign_in(client).status_code == 401
        assert sign_in(client, password="new-pw").status_code == 200

    def test_reset_token_single_use(self, client):
        sign_up(client)
        reset_token = client.post("/reset-password", json={"email": "a@x.com"}).get_json()["resetToken"]

        first = client.post(f"/reset-password/{reset_token}", json={"password": "new-pw"})
        second = client.post(f"/reset-password/{reset_token}", json={"password": "newer-pw"})

        assert first.status_code == 200
        assert second.status_code == 401
        assert second.get_json()["error"] == "INVALID_OR_EXPIRED_TOKEN"

    def test_request_unknown_email(self, client):
        response = client.post("/reset-password", json={"email": "nobody@x.com"})
        assert response.status_code == 404

    def test_request_missing_email(self, client):
        response = client.post("/reset-password", json={})
        assert response.status_code == 400

    def test_confirm_missing_password(self, client):
        sign_up(client)
        reset_token = client.post("/reset-password", json={"email": "a@x.com"}).get_json()["resetToken"]

        response = client.post(f"/reset-password/{reset_token}", json={})
        assert response.status_code == 400

    def test_confirm_unknown_token(self, client):
        response = client.post("/reset-password/not-a-token", json={"password": "new-pw"})
        assert response.status_code == 401

    def test_confirm_after_account_deleted(self, client):
        sign_up(client)
        access_token = sign_in(client).get_json()["token"]
        reset_token = client.post("/reset-password", json={"email": "a@x.com"}).get_json()["resetToken"]
        client.delete("/delete-user", headers={"Authorization": f"Bearer {access_token}"})

        response = client.post(f"/reset-password/{reset_token}", json={"password": "new-pw"})
        assert response.status_code == 404


class TestDeleteUser:

    def test_deletes_account_and_revokes_refresh_tokens(self, client):
        sign_up(client)
        tokens = sign_in(client).get_json()
        headers = {"Authorization": f"Bearer {tokens['token']}"}

        response = client.delete("/delete-user", headers=headers)
        assert response.status_code == 200

        assert client.post("/token", json={"token": tokens["refreshToken"]}).status_code == 401
        assert sign_in(client).status_code == 401

    def test_reset_tokens_survive_deletion(self, client, app):
        sign_up(client)
        access_token = sign_in(client).get_json()["token"]
        reset_token = client.post("/reset-password", json={"email": "a@x.com"}).get_json()["resetToken"]

        client.delete("/delete-user", headers={"Authorization": f"Bearer {access_token}"})

        with app.app_context():
            assert storage.find_by(ResetToken, token=reset_token) is not None

    def test_second_delete_reports_missing_user(self, client):
        sign_up(client)
        headers = {"Authorization": f"Bearer {sign_in(client).get_json()['token']}"}

        client.delete("/delete-user", headers=headers)
        response = client.delete("/delete-user", headers=headers)
        assert response.status_code == 404

    def test_requires_token(self, client):
        assert client.delete("/delete-user").status_code == 401


class TestMisc:

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/does-not-exist")
        assert response.status_code == 404
        assert response.get_json()["error"] == "NOT_FOUND"

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.get_json()["docs"] == "/apidocs/"

    def test_swagger_spec_lists_auth_routes(self, client):
        response = client.get("/swagger.json")
        assert response.status_code == 200
        paths = response.get_json()["paths"]
        assert "/sign-in" in paths

    def test_unexpected_failure_is_opaque_500(self, client, monkeypatch):
        from services import auth as auth_service

        def broken_register(email, password):
            raise RuntimeError("database exploded")

        monkeypatch.setattr(auth_service, "register", broken_register)
        response = sign_up(client)

        assert response.status_code == 500
        data = response.get_json()
        assert data["error"] == "INTERNAL_ERROR"
        assert "database exploded" not in data["message"]
        assert "details" not in data
