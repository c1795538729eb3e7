"""Chainable query builders and the models that execute them."""

from querychain.query.async_model import AsyncModel
from querychain.query.builder import QueryBuilder
from querychain.query.model import Model

__all__ = ["QueryBuilder", "Model", "AsyncModel"]
