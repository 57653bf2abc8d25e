"""API router factory functions."""
from .crawls import create_crawls_router
from .pages import create_pages_router
from .systems import create_systems_router

__all__ = [
    "create_crawls_router",
    "create_pages_router",
    "create_systems_router",
]
