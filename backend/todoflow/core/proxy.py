"""WSGI proxy middleware configuration helper."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Apply :class:`werkzeug.middleware.proxy_fix.ProxyFix` when enabled.

    Parameters
    ----------
    app: flask.Flask
        Application whose WSGI pipeline should respect upstream proxy headers.

    Notes
    -----
    ``request.remote_addr`` is recorded on every refresh token and keys the
    login rate limit, so the number of trusted ``X-Forwarded-For`` hops
    (``PROXYFIX_X_FOR``, default 1) must match the deployment. Disable with
    ``USE_PROXYFIX = False`` when the app is exposed directly.
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXYFIX_X_FOR", 1))
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=1, x_host=1)
