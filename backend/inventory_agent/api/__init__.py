"""API package."""

from inventory_agent.api.middleware import LoggingMiddleware
from inventory_agent.api.routes import router

__all__ = [
    "router",
    "LoggingMiddleware",
]
