"""HTTP query service for apirings."""

from apirings.api.app import create_app, get_registry, reset_registry, set_registry
from apirings.api.routes import router

__all__ = [
    "create_app",
    "get_registry",
    "reset_registry",
    "set_registry",
    "router",
]
