"""ASGI entry point: ``uvicorn formhub.main:app``."""

from formhub import create_app

app = create_app()
