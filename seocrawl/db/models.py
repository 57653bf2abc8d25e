from __future__ import annotations


from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import declarative_base


Base = declarative_base()


class CrawlSession(Base):
    __tablename__ = "crawl_sessions"

    session_id = Column(Integer, primary_key=True)
    site_id = Column(String(255), nullable=False, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    start_url = Column(Text, nullable=False)
    status = Column(String(32), nullable=False, default="in_progress")
    total_urls_scraped = Column(Integer, nullable=False, default=0)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    error_message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class CrawlSessionUrl(Base):
    """One row per URL in a session's visited or failed set."""
    __tablename__ = "crawl_session_urls"
    __table_args__ = (UniqueConstraint("session_id", "kind", "url", name="uq_session_url_kind"),)

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey("crawl_sessions.session_id"), nullable=False, index=True)
    kind = Column(String(16), nullable=False)  # visited | failed
    url = Column(Text, nullable=False)


class CrawlSessionPage(Base):
    __tablename__ = "crawl_session_pages"
    __table_args__ = (UniqueConstraint("session_id", "page_id", name="uq_session_page"),)

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey("crawl_sessions.session_id"), nullable=False, index=True)
    page_id = Column(Integer, ForeignKey("page_records.page_id"), nullable=False)


class PageRecord(Base):
    __tablename__ = "page_records"
    __table_args__ = (UniqueConstraint("page_identifier", "session_id", name="uq_page_identifier_session"),)

    page_id = Column(Integer, primary_key=True)
    page_identifier = Column(String(64), nullable=False, index=True)
    session_id = Column(Integer, ForeignKey("crawl_sessions.session_id"), nullable=False, index=True)
    url = Column(Text, nullable=False)
    site_id = Column(String(255), nullable=True, index=True)
    user_id = Column(String(255), nullable=True, index=True)

    title = Column(Text, nullable=True)
    meta_description = Column(Text, nullable=True)
    author = Column(Text, nullable=True)
    keywords = Column(JSON, nullable=False, default=list)
    headings = Column(JSON, nullable=False, default=list)
    paragraphs = Column(JSON, nullable=False, default=list)
    links = Column(JSON, nullable=False, default=list)
    images = Column(JSON, nullable=False, default=list)
    lists = Column(JSON, nullable=False, default=list)
    tables = Column(JSON, nullable=False, default=list)
    text_content = Column(JSON, nullable=False, default=list)
    navigation = Column(JSON, nullable=False, default=list)
    header = Column(JSON, nullable=False, default=list)
    footer = Column(JSON, nullable=False, default=list)
    main = Column(JSON, nullable=False, default=list)
    articles = Column(JSON, nullable=False, default=list)
    sections = Column(JSON, nullable=False, default=list)
    forms = Column(JSON, nullable=False, default=list)

    raw_markup = Column(Text, nullable=True)
    optimized_markup = Column(Text, nullable=True)

    file_size = Column(Integer, nullable=False, default=0)
    extraction_method = Column(String(64), nullable=True)
    scraped_at = Column(DateTime(timezone=True), nullable=True)
    saved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
