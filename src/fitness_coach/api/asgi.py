"""ASGI entrypoint for the fitness coach API."""

from fitness_coach.api.app import create_app
from fitness_coach.containers import build_container

app = create_app(build_container())
