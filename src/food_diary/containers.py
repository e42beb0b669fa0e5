"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from food_diary.adapters.backend_gateway import BackendGateway, HttpxBackendGateway
from food_diary.config import Settings
from food_diary.services.credentials import CredentialVerifier, build_account
from food_diary.services.sessions import SessionIssuer


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    gateway: BackendGateway
    credential_verifier: CredentialVerifier
    session_issuer: SessionIssuer
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    gateway = HttpxBackendGateway.create(
        base_url=resolved_settings.api_base_url,
        api_key=resolved_settings.api_key,
    )
    account = build_account(
        resolved_settings.app_username, resolved_settings.app_password_hash
    )
    session_issuer = SessionIssuer(
        secret=resolved_settings.session_secret,
        max_age=timedelta(seconds=resolved_settings.session_max_age_seconds),
    )

    async def close_resources() -> None:
        await gateway.close()

    return AppContainer(
        settings=resolved_settings,
        gateway=gateway,
        credential_verifier=CredentialVerifier(account),
        session_issuer=session_issuer,
        close_resources=close_resources,
    )
