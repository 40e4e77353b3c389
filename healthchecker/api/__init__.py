"""HTTP exposition layer.

Exposes:
    create_app -- FastAPI application factory.
"""

from healthchecker.api.app import create_app

__all__ = ["create_app"]
