from .engine import make_engine, init_db
from .models import Base, CrawlSession, CrawlSessionUrl, CrawlSessionPage, PageRecord

__all__ = [
    "make_engine",
    "init_db",
    "Base",
    "CrawlSession",
    "CrawlSessionUrl",
    "CrawlSessionPage",
    "PageRecord",
]
