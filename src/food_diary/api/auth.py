"""Login, logout and session endpoints."""

from __future__ import annotations

import html
import logging
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from fastapi import APIRouter, Form, Query, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse

from food_diary.services.sessions import SESSION_COOKIE_NAME

if TYPE_CHECKING:
    from food_diary.config import Settings
    from food_diary.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

INVALID_CREDENTIALS = "Invalid credentials"


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """Attach the session token cookie to a response."""
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
        path="/",
    )


def safe_callback_url(raw: str | None) -> str:
    """Return ``raw`` if it is a same-site relative path, else ``/``."""
    if not raw or not raw.startswith("/") or raw.startswith("//") or "\\" in raw:
        return "/"
    return raw


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    callback_url: str | None = Query(default=None, alias="callbackUrl"),
    error: str | None = None,
) -> HTMLResponse:
    """Render the login form."""
    error_banner = (
        f'<p class="error">{html.escape(error)}</p>' if error else ""
    )
    page = _LOGIN_HTML.format(
        error_banner=error_banner,
        callback_url=html.escape(safe_callback_url(callback_url), quote=True),
    )
    return HTMLResponse(page)


@router.post("/login")
async def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    callback_url: str = Form("/", alias="callbackUrl"),
) -> RedirectResponse:
    """Verify credentials and establish a session."""
    container: AppContainer = request.app.state.container
    callback_url = safe_callback_url(callback_url)
    account = container.credential_verifier.verify(username, password)
    if account is None:
        logger.info("Failed login attempt")
        query = urlencode({"error": INVALID_CREDENTIALS, "callbackUrl": callback_url})
        return RedirectResponse(url=f"/login?{query}", status_code=303)
    token = container.session_issuer.issue(account)
    response = RedirectResponse(url=callback_url, status_code=303)
    set_session_cookie(response, token, container.settings)
    logger.info("Account %s logged in", account.id)
    return response


@router.post("/logout")
async def logout() -> RedirectResponse:
    """Drop the session cookie and return to the login page."""
    response = RedirectResponse(url="/login", status_code=303)
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return response


@router.get("/api/auth/session")
async def current_session(request: Request) -> dict[str, object]:
    """Return the current session, or an empty object when signed out."""
    container: AppContainer = request.app.state.container
    claims = container.session_issuer.validate(request.cookies.get(SESSION_COOKIE_NAME))
    if claims is None:
        return {}
    return {
        "user": {"id": claims.account_id, "name": claims.name},
        "expires": claims.expires_at.isoformat(),
    }


_LOGIN_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Food Diary Login</title>
    <style>
      body {{ font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }}
      .row {{ margin-bottom: 1rem; }}
      input {{ padding: 0.4rem 0.6rem; width: 320px; }}
      button {{ padding: 0.4rem 0.8rem; }}
      .error {{ color: #b91c1c; }}
    </style>
  </head>
  <body>
    <h1>Login</h1>
    {error_banner}
    <form method="post" action="/login">
      <input type="hidden" name="callbackUrl" value="{callback_url}" />
      <div class="row">
        <label for="username">Username</label><br />
        <input id="username" name="username" type="text" required autocomplete="username" />
      </div>
      <div class="row">
        <label for="password">Password</label><br />
        <input id="password" name="password" type="password" required autocomplete="current-password" />
      </div>
      <button type="submit">Sign in</button>
    </form>
  </body>
</html>
"""
