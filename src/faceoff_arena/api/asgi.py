"""ASGI entrypoint for the FaceOff Arena API."""

from faceoff_arena.api.app import create_app
from faceoff_arena.containers import build_container

app = create_app(build_container())
