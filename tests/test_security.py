from unittest import mock

from firebase_admin import auth

from abhaya.utils.security import InvalidTokenError, user_from_claims

REPORT = {
    "incidentType": "Theft",
    "incidentTime": "2025-03-02T10:00",
    "incidentPlace": "Koti",
    "latitude": 17.385,
    "longitude": 78.4867,
}


def test_authority_claims():
    user = user_from_claims({"uid": "u1", "email": "Authority@Example.org", "firebase": {"sign_in_provider": "password"}})
    assert user.is_authority is True
    assert user.is_anonymous is False


def test_anonymous_claims():
    user = user_from_claims({"uid": "anon", "firebase": {"sign_in_provider": "anonymous"}})
    assert user.is_anonymous is True
    assert user.is_authority is False
    assert user.email is None


def test_regular_user_claims():
    user = user_from_claims({"sub": "u2", "email": "someone@example.org"})
    assert user.uid == "u2"
    assert user.is_authority is False


@mock.patch("abhaya.utils.security.verify_id_token")
def test_bearer_token_is_verified(verify, client):
    verify.return_value = {"uid": "u3", "email": "someone@example.org"}

    r = client.post("/incidents", json=REPORT, headers={"Authorization": "Bearer good-token"})

    assert r.status_code == 201
    assert r.json()["userId"] == "u3"
    verify.assert_called_once_with("good-token")


@mock.patch("abhaya.utils.security.verify_id_token")
def test_invalid_token_is_rejected(verify, client):
    verify.side_effect = InvalidTokenError("Invalid ID token: expired")
    r = client.post("/incidents", json=REPORT, headers={"Authorization": "Bearer stale"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid authentication token"


@mock.patch("abhaya.utils.security.verify_id_token")
def test_non_bearer_header_counts_as_logged_out(verify, client):
    r = client.post("/incidents", json=REPORT, headers={"Authorization": "Basic abc"})
    assert r.status_code == 401
    verify.assert_not_called()


@mock.patch("abhaya.utils.security.verify_id_token")
def test_authority_token_opens_dashboard(verify, client):
    verify.return_value = {"uid": "a1", "email": "authority@example.org"}
    r = client.get("/dashboard", headers={"Authorization": "Bearer token"})
    assert r.status_code == 200


@mock.patch("abhaya.utils.security.initialize_app_if_needed")
@mock.patch("abhaya.utils.security.auth.verify_id_token")
def test_rejected_firebase_token_maps_to_401(sdk_verify, _init, client):
    sdk_verify.side_effect = auth.InvalidIdTokenError("Token signature invalid")
    r = client.post("/incidents", json=REPORT, headers={"Authorization": "Bearer forged"})
    assert r.status_code == 401


@mock.patch("abhaya.utils.security.initialize_app_if_needed")
@mock.patch("abhaya.utils.security.auth.verify_id_token")
def test_misconfigured_firebase_is_not_blamed_on_the_caller(sdk_verify, _init, client):
    sdk_verify.side_effect = ValueError("Failed to ascertain project ID from the credential")
    r = client.post("/incidents", json=REPORT, headers={"Authorization": "Bearer token"})
    assert r.status_code == 503
    assert r.json()["detail"] == "Authentication service unavailable"
