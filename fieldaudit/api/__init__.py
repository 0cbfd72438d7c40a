"""REST API layer for fieldaudit.

Exposes:
    create_app -- FastAPI application factory.
"""

from fieldaudit.api.app import create_app

__all__ = ["create_app"]
