"""Authentication endpoints using the service layer."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, request

from todoflow.api.deps import current_context, json_response, remote_address, require_auth, timing
from todoflow.core.errors import NotFound
from todoflow.core.extensions import limiter
from todoflow.core.security import get_auth_service
from todoflow.schemas import LoginSchema, RefreshTokenSchema, RegisterSchema, WhoAmISchema
from todoflow.services.auth.dto import LoginIn, RefreshIn
from todoflow.services.identity.directory import SQLAlchemyUserDirectory

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
whoami_schema = WhoAmISchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


@bp.post("/register")
@timing
def register():
    """Create an identity. Tokens are obtained separately through ``/login``."""

    data = register_schema.load(request.get_json(silent=True) or {})
    outcome = get_auth_service().create_user(
        data["username"], data["email"], data.get("first_name"), data["password"]
    )
    status = HTTPStatus.CREATED if outcome.success else HTTPStatus.BAD_REQUEST
    return json_response(outcome.to_dict(), status=status)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue an access/refresh pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    outcome = get_auth_service().login_dto(
        LoginIn(username=data["username"], password=data["password"], remote_address=remote_address())
    )
    status = HTTPStatus.OK if outcome.success else HTTPStatus.UNAUTHORIZED
    return json_response(outcome.to_dict(), status=status)


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate a refresh token presented with its (usually expired) access token."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    outcome = get_auth_service().refresh_dto(
        RefreshIn(access_token=data["access_token"], refresh_token=data["refresh_token"]),
        remote_address=remote_address(),
    )
    status = HTTPStatus.OK if outcome.success else HTTPStatus.UNAUTHORIZED
    return json_response(outcome.to_dict(), status=status)


@bp.get("/me")
@require_auth
@timing
def whoami():
    """Return the authenticated identity."""

    ctx = current_context()
    identity = SQLAlchemyUserDirectory(ctx=ctx).find_by_id(ctx.actor_id or "")
    if identity is None:
        raise NotFound("User not found")
    return json_response({"data": whoami_schema.dump(identity)})
