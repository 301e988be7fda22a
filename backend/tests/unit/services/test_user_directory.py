"""Unit tests for SQLAlchemyUserDirectory (identity creation and lookup)."""

from __future__ import annotations

import pytest

from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from todoflow.models.user import User
from todoflow.services._shared.errors import IdentityValidationError
from todoflow.services.identity.directory import password_policy_errors
from todoflow.services.identity.dto import IdentityCreateIn


def _create_in(**overrides) -> IdentityCreateIn:
    data = {"username": "grace", "email": "grace@example.com", "first_name": "Grace", "password": "Secret123!"}
    data.update(overrides)
    return IdentityCreateIn(**data)


@pytest.mark.parametrize(
    "password, expected",
    [
        ("Secret123!", []),
        ("Ab1!", ["password_too_short"]),
        ("secret123!", ["password_requires_upper"]),
        ("SECRET123!", ["password_requires_lower"]),
        ("Secretabc!", ["password_requires_digit"]),
        ("Secret1234", ["password_requires_non_alphanumeric"]),
    ],
)
def test_password_policy(password, expected):
    assert [e.code for e in password_policy_errors(password)] == expected


def test_create_identity_hashes_password_and_normalizes_email(directory, session):
    out = directory.create_identity(_create_in(email="  Grace@Example.COM "))

    row = session.get(User, out.id)
    assert row.email == "grace@example.com"
    assert row.password_hash and row.password_hash != "Secret123!"
    assert row.verify_password("Secret123!")


def test_create_identity_reports_all_failures(directory, session):
    with pytest.raises(IdentityValidationError) as exc:
        directory.create_identity(_create_in(username="bad name", email="not-an-email", password="Secret123!"))

    assert [e.code for e in exc.value.errors] == ["invalid_user_name", "invalid_email"]


def test_create_identity_rejects_email_shaped_username(directory, session):
    with pytest.raises(IdentityValidationError) as exc:
        directory.create_identity(_create_in(username="grace@example.org"))

    assert [(e.code, e.description) for e in exc.value.errors] == [
        (
            "invalid_user_name",
            "User name 'grace@example.org' is invalid, can only contain letters, digits or '-._+'.",
        )
    ]
    assert directory.create_identity(_create_in(username="grace.hopper-1+x_y")).username == "grace.hopper-1+x_y"


def test_create_identity_rejects_duplicates(directory, session):
    UserFactory(username="heidi", email="heidi@example.com")

    with pytest.raises(IdentityValidationError) as exc:
        directory.create_identity(_create_in(username="heidi", email="HEIDI@example.com"))

    assert [e.code for e in exc.value.errors] == ["duplicate_user_name", "duplicate_email"]
    assert session.query(User).filter_by(username="heidi").count() == 1


def test_find_by_username_or_email(directory, session):
    user = UserFactory(username="ivan", email="ivan@example.com")

    assert directory.find_by_username_or_email("ivan").id == user.id
    assert directory.find_by_username_or_email("IVAN@example.com").id == user.id
    assert directory.find_by_username_or_email("nobody") is None
    assert directory.find_by_username_or_email("   ") is None


def test_find_by_id(directory, session):
    user = UserFactory()

    found = directory.find_by_id(user.id)

    assert found is not None and found.username == user.username
    assert directory.find_by_id("missing") is None
    assert directory.find_by_id("") is None


def test_verify_password(directory, session):
    user = UserFactory()
    identity = directory.find_by_id(user.id)

    assert directory.verify_password(identity, DEFAULT_PASSWORD) is True
    assert directory.verify_password(identity, "nope") is False
    assert directory.verify_password(None, DEFAULT_PASSWORD) is False
