"""REST API layer for flystate.

Exposes:
    create_app -- FastAPI application factory.
"""

from flystate.api.app import create_app

__all__ = ["create_app"]
