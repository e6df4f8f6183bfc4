"""flystate: declarative reconciliation of Fly.io apps and their secrets."""

__version__ = "0.1.0"
