"""Tests for JWT issuance and verification."""

from __future__ import annotations

import time

import pytest
from jose import jwt

from account_service.core.exceptions import TokenExpiredError, TokenInvalidError
from account_service.core.settings import AuthSettings
from account_service.infra.auth import TokenService, TokenType

USER_ID = "64b7f0c2e4b0a1a2b3c4d5e6"


@pytest.fixture
def settings() -> AuthSettings:
    return AuthSettings(access_token_secret="access-secret", refresh_token_secret="refresh-secret")


@pytest.fixture
def tokens(settings) -> TokenService:
    return TokenService(settings)


class TestIssue:
    def test_pair_round_trips_with_claims(self, tokens):
        pair = tokens.issue_pair(USER_ID, "alice@example.com")

        access = tokens.decode(pair.access_token, TokenType.ACCESS)
        refresh = tokens.decode(pair.refresh_token, TokenType.REFRESH)

        assert access.sub == refresh.sub == USER_ID
        assert access.email == "alice@example.com"
        assert access.exp - access.iat == 86_400
        assert refresh.exp - refresh.iat == 604_800

    def test_tokens_are_signed_with_separate_secrets(self, tokens):
        pair = tokens.issue_pair(USER_ID, None)

        assert jwt.decode(pair.access_token, "access-secret", algorithms=["HS256"])["type"] == "access"
        assert jwt.decode(pair.refresh_token, "refresh-secret", algorithms=["HS256"])["type"] == "refresh"


class TestDecode:
    def test_refresh_token_is_not_an_access_token(self, tokens):
        pair = tokens.issue_pair(USER_ID, None)

        with pytest.raises(TokenInvalidError):
            tokens.decode(pair.refresh_token, TokenType.ACCESS)

    def test_access_token_is_not_a_refresh_token(self, tokens):
        pair = tokens.issue_pair(USER_ID, None)

        with pytest.raises(TokenInvalidError):
            tokens.decode(pair.access_token, TokenType.REFRESH)

    def test_wrong_type_claim_is_rejected(self, tokens):
        now = int(time.time())
        token = jwt.encode(
            {"sub": USER_ID, "type": "refresh", "iat": now, "exp": now + 60}, "access-secret", algorithm="HS256",
        )

        with pytest.raises(TokenInvalidError):
            tokens.decode(token, TokenType.ACCESS)

    def test_expired_token(self, tokens):
        now = int(time.time())
        token = jwt.encode(
            {"sub": USER_ID, "type": "access", "iat": now - 120, "exp": now - 60},
            "access-secret",
            algorithm="HS256",
        )

        with pytest.raises(TokenExpiredError):
            tokens.decode(token, TokenType.ACCESS)

    def test_garbage_token(self, tokens):
        with pytest.raises(TokenInvalidError):
            tokens.decode("not.a.token", TokenType.ACCESS)


class TestBearer:
    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("Bearer abc", "abc"),
            ("bearer  abc ", "abc"),
            ("Basic abc", None),
            ("Bearer ", None),
            (None, None),
        ],
    )
    def test_extract_bearer(self, tokens, header, expected):
        assert tokens.extract_bearer(header) == expected


class TestSettings:
    def test_secrets_must_differ(self):
        with pytest.raises(ValueError, match="must differ"):
            AuthSettings(access_token_secret="same", refresh_token_secret="same")
