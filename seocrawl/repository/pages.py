import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from seocrawl.db.models import PageRecord as DBPageRecord
from seocrawl.domain import PageRecord
from seocrawl.domain.page_record import SEQUENCE_FIELDS
from seocrawl.exceptions import PageStoreError, PersistenceError

logger = logging.getLogger(__name__)

_SCALAR_FIELDS = (
    "url",
    "site_id",
    "user_id",
    "title",
    "meta_description",
    "author",
    "raw_markup",
    "optimized_markup",
    "file_size",
    "extraction_method",
    "scraped_at",
)


class PagesRepository:
    """Repository for per-page crawl results.

    Pages are keyed by (page_identifier, session_id): the same URL crawled in
    a later session gets its own row, re-processing it within a session
    updates the existing row.
    Requires an explicit `session_factory` (callable returning a `Session`).
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    @staticmethod
    def _sanitize_text(val):
        """Remove NUL (\x00) characters from text fields to satisfy DB constraints.

        Postgres TEXT columns cannot contain NULs; rendered documents
        occasionally carry them.
        """
        if isinstance(val, str):
            return val.replace("\x00", "")
        return val

    def get_session(self) -> Session:
        return self.session_factory()

    def _to_domain(self, row: DBPageRecord, full: bool = True) -> PageRecord:
        sequences = {name: getattr(row, name) or [] for name in SEQUENCE_FIELDS}
        return PageRecord(
            page_id=row.page_id,
            page_identifier=row.page_identifier,
            session_id=row.session_id,
            url=row.url,
            site_id=row.site_id,
            user_id=row.user_id,
            title=row.title,
            meta_description=row.meta_description,
            author=row.author,
            raw_markup=row.raw_markup if full else None,
            optimized_markup=row.optimized_markup if full else None,
            file_size=row.file_size,
            extraction_method=row.extraction_method,
            scraped_at=row.scraped_at,
            saved_at=row.saved_at,
            **sequences,
        )

    def _apply(self, row: DBPageRecord, page: PageRecord, saved_at: datetime) -> None:
        for name in _SCALAR_FIELDS:
            setattr(row, name, self._sanitize_text(getattr(page, name)))
        for name in SEQUENCE_FIELDS:
            setattr(row, name, list(getattr(page, name) or []))
        row.saved_at = saved_at

    def _find(self, session, page_identifier: str, session_id: int) -> Optional[DBPageRecord]:
        q = select(DBPageRecord).where(
            DBPageRecord.page_identifier == page_identifier,
            DBPageRecord.session_id == session_id,
        )
        return session.execute(q).scalars().first()

    def upsert_page(self, page: PageRecord) -> PageRecord:
        """Insert or update the page keyed by (page_identifier, session_id).

        Raises `PersistenceError` on any store failure.
        """
        if not page.page_identifier or page.session_id is None:
            raise PersistenceError(page.url, ValueError("page_identifier and session_id are required"))
        saved_at = datetime.now(timezone.utc)
        try:
            with self.get_session() as session:
                row = self._find(session, page.page_identifier, page.session_id)
                if row is None:
                    row = DBPageRecord(page_identifier=page.page_identifier, session_id=page.session_id)
                    self._apply(row, page, saved_at)
                    session.add(row)
                    # Another writer may insert the same key concurrently:
                    # catch IntegrityError, rollback and update the winner's row.
                    try:
                        session.commit()
                    except IntegrityError:
                        session.rollback()
                        row = self._find(session, page.page_identifier, page.session_id)
                        if row is None:
                            raise
                        self._apply(row, page, saved_at)
                        session.commit()
                else:
                    self._apply(row, page, saved_at)
                    session.commit()
                session.refresh(row)
                return self._to_domain(row)
        except SQLAlchemyError as e:
            raise PersistenceError(page.url, e) from e

    def get_page(self, page_id: int, full: bool = True) -> Optional[PageRecord]:
        try:
            with self.get_session() as session:
                row = session.execute(select(DBPageRecord).where(DBPageRecord.page_id == page_id)).scalars().first()
                if not row:
                    return None
                return self._to_domain(row, full=full)
        except SQLAlchemyError as e:
            raise PageStoreError(f"Could not load page {page_id}: {e}") from e

    def list_pages_by_session(self, session_id: int, full: bool = False, limit: Optional[int] = None, offset: Optional[int] = None) -> List[PageRecord]:
        try:
            with self.get_session() as session:
                q = select(DBPageRecord).where(DBPageRecord.session_id == session_id).order_by(DBPageRecord.page_id)
                if offset:
                    q = q.offset(offset)
                if limit:
                    q = q.limit(limit)
                rows = session.execute(q).scalars().all()
                return [self._to_domain(row, full=full) for row in rows]
        except SQLAlchemyError as e:
            raise PageStoreError(f"Could not list pages of session {session_id}: {e}") from e
