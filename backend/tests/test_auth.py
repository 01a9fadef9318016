"""
Registration, login and password reset.

Verifies:
- Registration validates fields in a fixed order and never stores plaintext
- Duplicate email answers 200 with success=false
- Login status codes kept for existing clients (404 / 200 / 200)
- Forgot-password requires both email and security answer
"""

import pytest

from storefront.extensions import db
from storefront.models import User, ROLE_CUSTOMER
from storefront.services import auth_service, token_service
from storefront.validation import ConflictError

from conftest import CUSTOMER_PASSWORD, auth_headers


REGISTER_URL = "/api/v1/auth/register"
LOGIN_URL = "/api/v1/auth/login"
FORGOT_URL = "/api/v1/auth/forgot-password"


def registration(**overrides):
    payload = {
        "name": "Rita Register",
        "email": "rita@example.com",
        "password": "Secr3t!pw",
        "phone": "555-987-6543",
        "address": "22 Side St",
        "answer": "football",
    }
    payload.update(overrides)
    return payload


# =============================================================================
# REGISTER
# =============================================================================


class TestRegister:

    def test_creates_customer(self, client, db_session):
        resp = client.post(REGISTER_URL, json=registration())
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["success"] is True
        assert body["message"] == "User Register Successfully"
        assert body["user"]["email"] == "rita@example.com"
        assert body["user"]["role"] == ROLE_CUSTOMER
        assert "password_hash" not in body["user"]
        assert "answer" not in body["user"]

    def test_password_is_hashed(self, client, db_session):
        client.post(REGISTER_URL, json=registration())
        user = db_session.query(User).filter_by(email="rita@example.com").one()
        assert user.password_hash != "Secr3t!pw"
        assert auth_service.verify_password("Secr3t!pw", user.password_hash)
        assert not auth_service.verify_password("Wr0ng!pw", user.password_hash)

    @pytest.mark.parametrize("missing,message", [
        ("name", "Name is Required"),
        ("email", "Email is Required"),
        ("password", "Password is Required"),
        ("phone", "Phone no is Required"),
        ("address", "Address is Required"),
        ("answer", "Answer is Required"),
    ])
    def test_required_fields(self, client, db_session, missing, message):
        payload = registration()
        del payload[missing]
        resp = client.post(REGISTER_URL, json=payload)
        assert resp.status_code == 400
        assert resp.get_json() == {"success": False, "message": message}

    def test_first_missing_field_reported(self, client, db_session):
        resp = client.post(REGISTER_URL, json={"password": "x"})
        assert resp.get_json()["message"] == "Name is Required"

    @pytest.mark.parametrize("overrides,message", [
        ({"email": "not-an-email"}, "Invalid Email"),
        ({"phone": "12"}, "Invalid Phone Number"),
        ({"phone": "\u0661\u0662\u0663-\u0664\u0665\u0666-\u0667\u0668\u0669\u0660"}, "Invalid Phone Number"),
        ({"password": "weakpass"}, "Invalid password"),
        ({"email": "bad", "phone": "12", "password": "weak"}, "Invalid Email"),
        ({"phone": "12", "password": "weak"}, "Invalid Phone Number"),
    ])
    def test_format_checks(self, client, db_session, overrides, message):
        resp = client.post(REGISTER_URL, json=registration(**overrides))
        assert resp.status_code == 400
        assert resp.get_json()["message"] == message
        assert db_session.query(User).count() == 0

    def test_duplicate_email(self, client, db_session):
        client.post(REGISTER_URL, json=registration())
        resp = client.post(REGISTER_URL, json=registration(name="Someone Else"))
        assert resp.status_code == 200
        assert resp.get_json() == {"success": False, "message": "Already Register please login"}
        assert db_session.query(User).filter_by(email="rita@example.com").count() == 1

    def test_unique_constraint_backs_duplicate_check(self, app, db_session, monkeypatch):
        """A registration that slips past the lookup still hits the constraint."""
        auth_service.register_user(registration())

        class _NoMatch:
            def __init__(self, query):
                self._query = query

            def filter_by(self, **kwargs):
                return self

            def first(self):
                return None

        real_query = db.session.query

        def query(model, *args):
            q = real_query(model, *args)
            return _NoMatch(q) if model is User else q

        monkeypatch.setattr(db.session, "query", query)
        with pytest.raises(ConflictError) as exc:
            auth_service.register_user(registration())
        monkeypatch.undo()

        assert exc.value.status_code == 200
        assert db_session.query(User).count() == 1

    def test_no_body(self, client, db_session):
        resp = client.post(REGISTER_URL)
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Name is Required"


# =============================================================================
# LOGIN
# =============================================================================


class TestLogin:

    def test_success(self, app, client, customer):
        resp = client.post(LOGIN_URL, json={"email": customer.email, "password": CUSTOMER_PASSWORD})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["success"] is True
        assert body["message"] == "login successfully"
        assert body["user"]["id"] == customer.id
        assert "password_hash" not in body["user"]

        claims = token_service.decode_access_token(body["token"])
        assert claims["_id"] == customer.id
        assert "exp" in claims

    @pytest.mark.parametrize("payload", [
        {},
        {"email": "shopper@example.com"},
        {"password": CUSTOMER_PASSWORD},
        {"email": "", "password": ""},
    ])
    def test_missing_input(self, client, customer, payload):
        resp = client.post(LOGIN_URL, json=payload)
        assert resp.status_code == 404
        assert resp.get_json() == {"success": False, "message": "Invalid email or password"}

    def test_unknown_email(self, client, customer):
        resp = client.post(LOGIN_URL, json={"email": "nobody@example.com", "password": CUSTOMER_PASSWORD})
        assert resp.status_code == 404
        assert resp.get_json()["message"] == "Email is not registerd"

    def test_wrong_password(self, client, customer):
        resp = client.post(LOGIN_URL, json={"email": customer.email, "password": "Wr0ng!pass"})
        assert resp.status_code == 200
        assert resp.get_json() == {"success": False, "message": "Invalid Password"}
        assert "token" not in resp.get_json()

    @pytest.mark.parametrize("password", [12345678, ["Passw0rd!"], {"value": "Passw0rd!"}])
    def test_non_string_password_is_wrong_password(self, client, customer, password):
        resp = client.post(LOGIN_URL, json={"email": customer.email, "password": password})
        assert resp.status_code == 200
        assert resp.get_json() == {"success": False, "message": "Invalid Password"}


# =============================================================================
# FORGOT PASSWORD
# =============================================================================


class TestForgotPassword:

    def test_reset_then_login(self, client, customer):
        resp = client.post(FORGOT_URL, json={
            "email": customer.email,
            "answer": "blue",
            "newPassword": "N3wPass!word",
        })
        assert resp.status_code == 200
        assert resp.get_json() == {"success": True, "message": "Password Reset Successfully"}

        old = client.post(LOGIN_URL, json={"email": customer.email, "password": CUSTOMER_PASSWORD})
        assert old.get_json()["success"] is False

        new = client.post(LOGIN_URL, json={"email": customer.email, "password": "N3wPass!word"})
        assert new.get_json()["success"] is True

    @pytest.mark.parametrize("payload,message", [
        ({}, "Email is required"),
        ({"email": "shopper@example.com"}, "answer is required"),
        ({"email": "shopper@example.com", "answer": "blue"}, "New Password is required"),
    ])
    def test_required_fields(self, client, customer, payload, message):
        resp = client.post(FORGOT_URL, json=payload)
        assert resp.status_code == 400
        assert resp.get_json()["message"] == message

    @pytest.mark.parametrize("email,answer", [
        ("shopper@example.com", "red"),
        ("nobody@example.com", "blue"),
    ])
    def test_wrong_email_or_answer(self, client, customer, email, answer):
        resp = client.post(FORGOT_URL, json={"email": email, "answer": answer, "newPassword": "N3wPass!word"})
        assert resp.status_code == 404
        assert resp.get_json() == {"success": False, "message": "Wrong Email Or Answer"}

    def test_weak_new_password(self, client, customer):
        resp = client.post(FORGOT_URL, json={"email": customer.email, "answer": "blue", "newPassword": "weak"})
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Invalid password"


# =============================================================================
# END TO END
# =============================================================================


class TestRegisterLoginFlow:

    def test_register_login_and_reach_protected_route(self, client, db_session):
        assert client.post(REGISTER_URL, json=registration()).status_code == 201

        login = client.post(LOGIN_URL, json={"email": "rita@example.com", "password": "Secr3t!pw"})
        token = login.get_json()["token"]

        resp = client.get("/api/v1/auth/test", headers=auth_headers(token))
        assert resp.status_code == 200
        assert resp.get_data(as_text=True) == "Protected Routes"

        orders = client.get("/api/v1/auth/orders", headers=auth_headers(token))
        assert orders.status_code == 200
        assert orders.get_json() == []

    def test_minimal_account_scenario(self, client, db_session):
        resp = client.post(REGISTER_URL, json={
            "name": "A",
            "email": "a@b.com",
            "password": "Pass123!",
            "phone": "123-456-7890",
            "address": "X",
            "answer": "Y",
        })
        assert resp.status_code == 201

        login = client.post(LOGIN_URL, json={"email": "a@b.com", "password": "Pass123!"})
        assert login.status_code == 200
        token = login.get_json()["token"]

        orders = client.get("/api/v1/auth/orders", headers={"Authorization": token})
        assert orders.status_code == 200
        assert orders.get_json() == []
