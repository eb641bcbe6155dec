"""Query service answering canonical-identifier header lookups."""

from .service import QueryService

__all__ = ["QueryService"]
