"""ASGI entrypoint for the kiosk print relay."""

from kiosk_print.api.app import create_app
from kiosk_print.containers import build_container

app = create_app(build_container())
