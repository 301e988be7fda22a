"""HTTP surface: versioned blueprint groups mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def _join_prefix(base_prefix: str, rel_prefix: str) -> str:
    segments = [s for s in (base_prefix.strip("/"), rel_prefix.strip("/")) if s]
    return "/" + "/".join(segments)


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Mount ``(blueprint, relative_prefix)`` pairs below ``base_prefix``.

    An empty relative prefix mounts the blueprint at the version root
    (``/api/v1/health``); ``"/auth"`` yields ``/api/v1/auth/...``.
    """
    for bp, rel_prefix in entries:
        app.register_blueprint(bp, url_prefix=_join_prefix(base_prefix, rel_prefix))


def init_app(app: Flask) -> None:
    """Register every API version on ``app``."""
    from todoflow.api.v1 import API_VERSION as V1
    from todoflow.api.v1 import REGISTRY as V1_REGISTRY

    api_base = app.config.get("API_BASE_PREFIX", "/api")
    register_blueprint_group(app, base_prefix=f"{api_base}/{V1}", entries=V1_REGISTRY)


__all__ = ["init_app", "register_blueprint_group"]
