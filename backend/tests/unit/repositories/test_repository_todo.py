from __future__ import annotations

from datetime import date

import pytest

from tests.factories.todo import TodoFactory
from tests.factories.user import UserFactory
from todoflow.repositories import TodoRepository


@pytest.fixture
def repo(session) -> TodoRepository:
    return TodoRepository(session=session)


class TestTodoRepository:
    def test_get_for_owner_hides_foreign_rows(self, repo):
        owner = UserFactory()
        mine = TodoFactory(owner=owner)
        theirs = TodoFactory()

        assert repo.get_for_owner(mine.id, owner.id) is mine
        assert repo.get_for_owner(theirs.id, owner.id) is None

    def test_list_sorting_and_tiebreak(self, repo):
        owner = UserFactory()
        b = TodoFactory(owner=owner, title="b", due_date=date(2031, 1, 2))
        a1 = TodoFactory(owner=owner, title="a1", due_date=date(2031, 1, 1))
        a2 = TodoFactory(owner=owner, title="a2", due_date=date(2031, 1, 1))

        assert repo.list_for_owner(owner.id) == [a1, a2, b]
        assert repo.list(filters={"owner_id": owner.id}, sort=["-due_date", "bogus"]) == [b, a1, a2]
        assert repo.list(filters={"owner_id": owner.id}, sort=["title"], limit=1, offset=1) == [a2]

    def test_assign_updates_rejects_non_whitelisted_keys(self, repo):
        todo = TodoFactory()

        with pytest.raises(ValueError):
            repo.assign_updates(todo, {"owner_id": "someone-else"})

        repo.assign_updates(todo, {"title": "  renamed  "})
        assert todo.title == "renamed"
