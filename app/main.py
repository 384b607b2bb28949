"""ASGI entrypoint of the finance tracker service."""

import logging

from app.core.app import create_app

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

app = create_app()
