"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class RegisterSchema(Schema):
    """Input payload for account registration.

    Only shape is checked here; password strength and uniqueness are
    reported by the user directory as structured errors.
    """

    username = fields.String(required=True, validate=validate.Length(min=1, max=50))
    email = fields.String(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    first_name = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=100))


class LoginSchema(Schema):
    """Input payload for authenticating a user (username or email)."""

    username = fields.String(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshTokenSchema(Schema):
    """Input payload for the refresh exchange."""

    access_token = fields.String(required=True, validate=validate.Length(min=1, max=4096))
    refresh_token = fields.String(required=True, validate=validate.Length(min=1, max=256))


class WhoAmISchema(Schema):
    """Response payload exposing identity details for the authenticated user."""

    id = fields.String(required=True)
    email = fields.String(required=True)
    username = fields.String(required=True)
    first_name = fields.String(allow_none=True)
