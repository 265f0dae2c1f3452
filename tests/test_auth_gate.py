from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from app.api.deps import AuthenticatedIdentity, authenticate_authorization
from app.core.constants import MSG_AUTH_REQUIRED, MSG_INVALID_TOKEN
from app.core.errors import AuthenticationRequired
from app.core.tokens import TokenClaims, TokenCodec

BOB = TokenClaims(user_id=7, email="bob@x.com", username="bob")


@pytest.mark.parametrize("header", [None, "", "   ", "Basic Ym9iOnB3", "Token abc", "Bearer", "Bearer   ", "abc"])
def test_missing_or_non_bearer_is_rejected_before_verification(header) -> None:
    codec = Mock(spec=TokenCodec)
    with pytest.raises(AuthenticationRequired) as exc_info:
        authenticate_authorization(header, codec)
    assert exc_info.value.message == MSG_AUTH_REQUIRED
    assert exc_info.value.status_code == 401
    codec.verify.assert_not_called()


def test_scheme_prefix_is_stripped_before_verification() -> None:
    codec = Mock(spec=TokenCodec)
    codec.verify.return_value = BOB
    identity = authenticate_authorization("Bearer abc.def.ghi", codec)
    codec.verify.assert_called_once_with("abc.def.ghi")
    assert identity == AuthenticatedIdentity(user_id=7, email="bob@x.com", username="bob")


def test_valid_token_yields_issued_identity(codec: TokenCodec) -> None:
    identity = authenticate_authorization(f"Bearer {codec.issue(BOB)}", codec)
    assert (identity.user_id, identity.email, identity.username) == (7, "bob@x.com", "bob")


def test_scheme_is_case_insensitive(codec: TokenCodec) -> None:
    identity = authenticate_authorization(f"bearer {codec.issue(BOB)}", codec)
    assert identity.username == "bob"


def test_expired_token_is_rejected(codec: TokenCodec) -> None:
    token = codec.issue(BOB, now=datetime.now(timezone.utc) - timedelta(days=2))
    with pytest.raises(AuthenticationRequired) as exc_info:
        authenticate_authorization(f"Bearer {token}", codec)
    assert exc_info.value.message == MSG_INVALID_TOKEN


def test_forged_token_is_rejected(codec: TokenCodec) -> None:
    token = TokenCodec("attacker-secret-0123456789abcdef-00").issue(BOB)
    with pytest.raises(AuthenticationRequired) as exc_info:
        authenticate_authorization(f"Bearer {token}", codec)
    assert exc_info.value.message == MSG_INVALID_TOKEN


def test_protected_route_without_header(client: TestClient) -> None:
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json() == {"message": MSG_AUTH_REQUIRED}
    assert response.headers["www-authenticate"] == "Bearer"


def test_protected_route_with_wrong_scheme(client: TestClient) -> None:
    response = client.get("/api/auth/me", headers={"Authorization": "Basic Ym9iOnB3"})
    assert response.status_code == 401
    assert response.json()["message"] == MSG_AUTH_REQUIRED


def test_protected_route_with_expired_token(client: TestClient) -> None:
    codec: TokenCodec = client.app.state.token_codec
    token = codec.issue(BOB, now=datetime.now(timezone.utc) - timedelta(days=2))
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == MSG_INVALID_TOKEN
