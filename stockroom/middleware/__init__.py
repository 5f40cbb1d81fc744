"""Custom FastAPI middleware components."""

from .observability import ObservabilityMiddleware

__all__ = ["ObservabilityMiddleware"]
