"""ASGI entrypoint for the photo sharing API."""

from photo_sharing.api.app import create_app
from photo_sharing.containers import build_container

app = create_app(build_container())
