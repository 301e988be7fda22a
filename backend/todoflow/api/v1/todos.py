"""Owner-scoped todo endpoints."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, request

from todoflow.api.deps import current_context, json_response, require_auth, timing
from todoflow.schemas import TodoCreateSchema, TodoListQuerySchema, TodoSchema, TodoUpdateSchema
from todoflow.services.todos.dto import TodoCreateIn, TodoUpdateIn
from todoflow.services.todos.service import TodoService

bp = Blueprint("todos", __name__, url_prefix="/todos")

todo_schema = TodoSchema()
todos_schema = TodoSchema(many=True)
create_schema = TodoCreateSchema()
update_schema = TodoUpdateSchema()
list_query_schema = TodoListQuerySchema()


def _service() -> TodoService:
    return TodoService(ctx=current_context())


@bp.get("")
@require_auth
@timing
def list_todos():
    """List the caller's todos ordered by due date."""

    args = list_query_schema.load(request.args)
    items = _service().list_for_owner(completed=args.get("completed"))
    return json_response({"data": todos_schema.dump(items)})


@bp.get("/count")
@require_auth
@timing
def count_todos():
    return json_response({"data": {"count": _service().count()}})


@bp.post("")
@require_auth
@timing
def create_todo():
    data = create_schema.load(request.get_json(silent=True) or {})
    todo = _service().create(TodoCreateIn(**data))
    return json_response({"data": todo_schema.dump(todo)}, status=HTTPStatus.CREATED)


@bp.get("/<int:todo_id>")
@require_auth
@timing
def get_todo(todo_id: int):
    return json_response({"data": todo_schema.dump(_service().get(todo_id))})


@bp.put("/<int:todo_id>")
@require_auth
@timing
def update_todo(todo_id: int):
    """Partially update a todo; absent fields stay untouched."""

    data = update_schema.load(request.get_json(silent=True) or {}, partial=True)
    todo = _service().update(todo_id, TodoUpdateIn(**data))
    return json_response({"data": todo_schema.dump(todo)})


@bp.delete("/<int:todo_id>")
@require_auth
@timing
def delete_todo(todo_id: int):
    _service().delete(todo_id)
    return "", HTTPStatus.NO_CONTENT
