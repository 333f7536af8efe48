"""API route handlers."""

from fieldsense.api.routes import classify, dataset, health, learned, model

__all__ = ["classify", "dataset", "health", "learned", "model"]
