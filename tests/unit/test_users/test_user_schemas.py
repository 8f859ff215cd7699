"""Tests for user input validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from account_service.features.users import Gender, UserCreate, UserListParams, UserStatus, UserUpdate

STRONG_PASSWORD = "Sup3r$ecret"


def valid_create(**overrides):
    values = {
        "firstName": "Alice",
        "lastName": "Smith",
        "email": "alice@example.com",
        "password": STRONG_PASSWORD,
    }
    values.update(overrides)
    return values


class TestUserCreate:
    def test_names_are_trimmed_and_email_lowercased(self):
        payload = UserCreate(**valid_create(firstName="  Alice ", email="Alice@Example.COM"))

        assert payload.first_name == "Alice"
        assert payload.email == "alice@example.com"

    @pytest.mark.parametrize("name", ["A", "x" * 21, "   "])
    def test_name_length_is_enforced(self, name):
        with pytest.raises(ValidationError):
            UserCreate(**valid_create(firstName=name))

    @pytest.mark.parametrize(
        "password",
        ["Sh0rt$", "alllowercase1$", "ALLUPPERCASE1$", "NoDigits$$", "NoSymbols123", "A1$" + "a" * 30],
    )
    def test_weak_passwords_are_rejected(self, password):
        with pytest.raises(ValidationError):
            UserCreate(**valid_create(password=password))

    def test_invalid_email_is_rejected(self):
        with pytest.raises(ValidationError):
            UserCreate(**valid_create(email="not-an-email"))

    def test_unknown_fields_are_rejected(self):
        with pytest.raises(ValidationError):
            UserCreate(**valid_create(role="admin"))

    def test_snake_case_names_are_accepted(self):
        payload = UserCreate(
            first_name="Alice", last_name="Smith", email="alice@example.com", password=STRONG_PASSWORD,
        )

        assert payload.last_name == "Smith"

    def test_to_document_uses_stored_names_and_drops_unset(self):
        payload = UserCreate(**valid_create(gender="FEMALE"))

        assert payload.to_document() == {
            "firstName": "Alice",
            "lastName": "Smith",
            "email": "alice@example.com",
            "password": STRONG_PASSWORD,
            "gender": "FEMALE",
        }


class TestUserUpdate:
    def test_to_changes_holds_only_given_fields(self):
        payload = UserUpdate(firstName=" Bob ", status=UserStatus.INACTIVE)

        assert payload.to_changes() == {"firstName": "Bob", "status": "INACTIVE"}

    def test_empty_update_has_no_changes(self):
        assert UserUpdate().to_changes() == {}

    def test_update_validates_password_strength(self):
        with pytest.raises(ValidationError):
            UserUpdate(password="weak")


class TestUserListParams:
    def test_defaults(self):
        params = UserListParams()

        assert (params.page, params.limit) == (1, 10)
        assert params.search is None

    def test_limit_is_capped(self):
        with pytest.raises(ValidationError):
            UserListParams(limit=101)

    def test_filters_are_parsed(self):
        params = UserListParams(search="  ali ", gender="MALE")

        assert params.search == "ali"
        assert params.gender is Gender.MALE
