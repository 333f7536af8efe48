"""HTTP API for field classification, learning and training."""

from .app import create_app

__all__ = ["create_app"]
