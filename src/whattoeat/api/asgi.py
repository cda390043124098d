"""ASGI entrypoint for the WhatToEat API."""

from whattoeat.api.app import create_app
from whattoeat.containers import build_container

app = create_app(build_container())
