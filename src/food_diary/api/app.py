"""FastAPI application factory."""

import html
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse

from food_diary.api.auth import router as auth_router
from food_diary.api.gate import add_request_gate
from food_diary.api.resources import router as resources_router
from food_diary.app_logging import configure_logging
from food_diary.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    if container.settings.disable_auth_in_dev:
        logger.warning("Authentication is disabled (DISABLE_AUTH_IN_DEV=true)")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    add_request_gate(app)
    app.include_router(auth_router)
    app.include_router(resources_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def home(request: Request) -> HTMLResponse:
        """Landing page for a signed-in user."""
        session = getattr(request.state, "session", None)
        name = html.escape(session.name) if session else "there"
        return HTMLResponse(_HOME_HTML.format(name=name))

    return app


_HOME_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>Food Diary</title>
  </head>
  <body>
    <h1>Food Diary</h1>
    <p>Hello, {name}.</p>
    <form method="post" action="/logout"><button type="submit">Log out</button></form>
  </body>
</html>
"""
