from .pages import PagesRepository
from .sessions import SessionsRepository

__all__ = ["PagesRepository", "SessionsRepository"]
