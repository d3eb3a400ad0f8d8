"""REST API layer for kubemeter.

Exposes:
    create_app -- FastAPI application factory.
"""

from kubemeter.api.app import create_app

__all__ = ["create_app"]
