"""Todo Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class BaseSchema(Schema):
    """Base schema enabling ordered output for consistent API responses."""

    class Meta:
        ordered = True


class TodoSchema(BaseSchema):
    """Serialize todo items for API responses."""

    id = fields.Int(dump_only=True)
    title = fields.String(required=True)
    description = fields.String(allow_none=True)
    due_date = fields.Date(required=True)
    is_completed = fields.Boolean()
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)


class TodoCreateSchema(BaseSchema):
    """Input payload for creating a todo."""

    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    description = fields.String(load_default=None, allow_none=True)
    due_date = fields.Date(required=True)
    is_completed = fields.Boolean(load_default=False)


class TodoUpdateSchema(BaseSchema):
    """Input payload for partially updating a todo."""

    title = fields.String(validate=validate.Length(min=1, max=200))
    description = fields.String(allow_none=True)
    due_date = fields.Date()
    is_completed = fields.Boolean()


class TodoListQuerySchema(Schema):
    """Query string for listing todos."""

    completed = fields.Boolean(load_default=None, allow_none=True)
