"""Serverless entrypoint exposing the food diary ASGI app."""

import sys
from pathlib import Path

_SRC = Path(__file__).resolve().parent.parent / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from food_diary.api.app import create_app  # noqa: E402
from food_diary.containers import build_container  # noqa: E402

app = create_app(build_container())
