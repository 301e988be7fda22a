from __future__ import annotations

import pytest

from tests.factories.user import UserFactory
from todoflow.repositories import UserRepository


@pytest.fixture
def repo(session) -> UserRepository:
    return UserRepository(session=session)


class TestUserRepository:
    def test_get_by_email_is_case_insensitive(self, repo):
        user = UserFactory(email="judy@example.com")

        assert repo.get_by_email("  JUDY@example.com ") is user

    def test_get_by_username_or_email(self, repo):
        user = UserFactory(username="Kim", email="kim@example.com")

        assert repo.get_by_username_or_email("Kim") is user
        assert repo.get_by_username_or_email("KIM@EXAMPLE.COM") is user
        # Usernames are compared exactly
        assert repo.get_by_username_or_email("kim") is None

    def test_login_with_at_sign_only_matches_emails(self, repo):
        squatter = UserFactory(username="nia@example.com", email="other@example.com")
        owner = UserFactory(username="nia", email="nia@example.com")

        assert repo.get_by_username_or_email("nia@example.com") is owner
        assert repo.get_by_username_or_email("other@example.com") is squatter
        assert repo.get_by_username_or_email("nia") is owner

    def test_exists_helpers(self, repo):
        UserFactory(username="leo", email="leo@example.com")

        assert repo.exists_by_username("leo")
        assert repo.exists_by_email("LEO@example.com")
        assert not repo.exists_by_username("leon")
        assert not repo.exists(email="nobody@example.com")

    def test_find_one_ignores_unknown_filters(self, repo):
        user = UserFactory(username="mia")

        assert repo.find_one(username="mia", password_hash="x") is user
