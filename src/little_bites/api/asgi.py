"""ASGI entrypoint for the Little Bites API."""

from little_bites.api.app import create_app
from little_bites.containers import build_container

app = create_app(build_container())
