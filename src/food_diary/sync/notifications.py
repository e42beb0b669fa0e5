"""User-visible notifications raised by the sync stores."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Interface for surfacing failure messages to the user."""

    def error(self, message: str, detail: object | None = None) -> None:
        """Show an error message; ``detail`` is for diagnostics only."""


@dataclass
class LoggingNotifier(Notifier):
    """Notifier that records messages and writes details to the log."""

    errors: list[str] = field(default_factory=list)

    def error(self, message: str, detail: object | None = None) -> None:
        logger.error("%s: %s", message, detail if detail is not None else "-")
        self.errors.append(message)
