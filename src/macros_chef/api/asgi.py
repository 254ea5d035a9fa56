"""ASGI entrypoint for the MacrosChef API."""

from macros_chef.api.app import create_app
from macros_chef.containers import build_container

app = create_app(build_container())
