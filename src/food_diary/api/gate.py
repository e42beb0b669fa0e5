"""Session gate in front of every page request."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from fastapi import FastAPI, Request, Response
from fastapi.responses import RedirectResponse

from food_diary.api.auth import set_session_cookie
from food_diary.services.sessions import SESSION_COOKIE_NAME

if TYPE_CHECKING:
    from food_diary.containers import AppContainer

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"

_EXCLUDED_PATHS = frozenset({LOGIN_PATH, "/logout", "/favicon.ico", "/health", "/api"})
_EXCLUDED_PREFIXES = ("/api/", "/static/", "/public/")


def is_protected_path(path: str) -> bool:
    """Return whether a request path requires a session."""
    if path in _EXCLUDED_PATHS:
        return False
    return not path.startswith(_EXCLUDED_PREFIXES)


def login_redirect(request: Request) -> RedirectResponse:
    """Redirect to the login page, remembering where the user was going."""
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    query = urlencode({"callbackUrl": target})
    return RedirectResponse(url=f"{LOGIN_PATH}?{query}", status_code=303)


def add_request_gate(app: FastAPI) -> None:
    """Install the session gate middleware on ``app``."""

    @app.middleware("http")
    async def request_gate(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        container: AppContainer = request.app.state.container
        if container.settings.disable_auth_in_dev:
            return await call_next(request)
        if not is_protected_path(request.url.path):
            return await call_next(request)

        issuer = container.session_issuer
        claims = issuer.validate(request.cookies.get(SESSION_COOKIE_NAME))
        if claims is None:
            return login_redirect(request)

        request.state.session = claims
        response = await call_next(request)
        set_session_cookie(response, issuer.renew(claims), container.settings)
        return response
