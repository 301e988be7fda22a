"""Factory Boy definition for :class:`todoflow.models.todo.Todo`."""

from __future__ import annotations

from datetime import date, timedelta

import factory

from tests.factories import BaseFactory
from tests.factories.user import UserFactory
from todoflow.models.todo import Todo


class TodoFactory(BaseFactory):
    """Build persisted todos; pass ``owner=<User>`` to reuse an existing user."""

    class Meta:
        model = Todo

    class Params:
        owner = factory.SubFactory(UserFactory)

    owner_id = factory.SelfAttribute("owner.id")
    title = factory.Faker("sentence", nb_words=4)
    description = factory.Faker("paragraph", nb_sentences=2)
    due_date = factory.Sequence(lambda n: date(2030, 1, 1) + timedelta(days=n))
    is_completed = False
