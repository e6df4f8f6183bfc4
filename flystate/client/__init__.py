"""Remote API client for flystate.

Exposes:
    GraphQLClient   -- httpx-based GraphQL transport with error classification.
    FlyAPI          -- typed remote operations used by the lifecycle controllers.
    classify_errors -- maps structured GraphQL errors to the error taxonomy.
    build_api       -- factory used by the application bootstrap.
"""

from __future__ import annotations

from flystate.client.api import FlyAPI
from flystate.client.graphql import REMOTE_CALL_TIMEOUT_SECONDS, GraphQLClient, classify_errors
from flystate.models.config import ClientConfig

__all__ = [
    "REMOTE_CALL_TIMEOUT_SECONDS",
    "FlyAPI",
    "GraphQLClient",
    "build_api",
    "classify_errors",
]


def build_api(config: ClientConfig) -> FlyAPI:
    """Build a FlyAPI bound to *config*. Raises ValueError when the token is empty."""
    return FlyAPI(GraphQLClient(config))
