import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from seocrawl.db.models import CrawlSession as DBCrawlSession
from seocrawl.db.models import CrawlSessionPage as DBCrawlSessionPage
from seocrawl.db.models import CrawlSessionUrl as DBCrawlSessionUrl
from seocrawl.domain import CrawlSession
from seocrawl.domain.crawl_session import STATUS_COMPLETED, STATUS_FAILED, STATUS_IN_PROGRESS
from seocrawl.exceptions import SessionCreateError, SessionStoreError

logger = logging.getLogger(__name__)

KIND_VISITED = "visited"
KIND_FAILED = "failed"


class SessionsRepository:
    """Repository for crawl session records.

    Every progress update is an independent store-side write (row insert or
    ``SET n = n + 1``), so overlapping writers never lose each other's updates.
    Requires an explicit `session_factory` (callable returning a `Session`).
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def get_session(self) -> Session:
        return self.session_factory()

    def create(self, site_id: str, user_id: str, start_url: str) -> int:
        try:
            with self.get_session() as session:
                row = DBCrawlSession(
                    site_id=site_id,
                    user_id=user_id,
                    start_url=start_url,
                    status=STATUS_IN_PROGRESS,
                    total_urls_scraped=0,
                )
                session.add(row)
                session.commit()
                session.refresh(row)
                return row.session_id
        except SQLAlchemyError as e:
            raise SessionCreateError(f"Could not create crawl session for {start_url}: {e}") from e

    def _append_url(self, session_id: int, kind: str, url: str) -> None:
        try:
            with self.get_session() as session:
                session.add(DBCrawlSessionUrl(session_id=session_id, kind=kind, url=url))
                try:
                    session.commit()
                except IntegrityError:
                    # already in the set
                    session.rollback()
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Could not append {kind} url to session {session_id}: {e}") from e

    def append_visited_url(self, session_id: int, url: str) -> None:
        self._append_url(session_id, KIND_VISITED, url)

    def append_failed_url(self, session_id: int, url: str) -> None:
        self._append_url(session_id, KIND_FAILED, url)

    def record_scraped_page(self, session_id: int, page_id: int) -> None:
        """Append `page_id` to the session and increment its scraped counter."""
        try:
            with self.get_session() as session:
                session.add(DBCrawlSessionPage(session_id=session_id, page_id=page_id))
                try:
                    session.flush()
                except IntegrityError:
                    session.rollback()
                    logger.debug("Page %s already recorded for session %s", page_id, session_id)
                    return
                result = session.execute(
                    update(DBCrawlSession)
                    .where(DBCrawlSession.session_id == session_id)
                    .values(total_urls_scraped=DBCrawlSession.total_urls_scraped + 1)
                )
                if result.rowcount == 0:
                    session.rollback()
                    raise SessionStoreError(f"Crawl session {session_id} not found")
                session.commit()
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Could not record page {page_id} for session {session_id}: {e}") from e

    def _replace_children(self, session, session_id: int, visited_urls: Iterable[str], failed_urls: Iterable[str], scraped_page_ids: Iterable[int]) -> None:
        session.execute(delete(DBCrawlSessionUrl).where(DBCrawlSessionUrl.session_id == session_id))
        session.execute(delete(DBCrawlSessionPage).where(DBCrawlSessionPage.session_id == session_id))
        rows = []
        for kind, urls in ((KIND_VISITED, visited_urls), (KIND_FAILED, failed_urls)):
            # dict.fromkeys keeps order and drops duplicates
            for url in dict.fromkeys(urls):
                rows.append(DBCrawlSessionUrl(session_id=session_id, kind=kind, url=url))
        for page_id in dict.fromkeys(scraped_page_ids):
            rows.append(DBCrawlSessionPage(session_id=session_id, page_id=page_id))
        session.add_all(rows)

    def finalize(
        self,
        session_id: int,
        *,
        total_urls_scraped: int,
        visited_urls: List[str],
        failed_urls: List[str],
        scraped_page_ids: List[int],
    ) -> bool:
        """Mark the session completed and overwrite its progress with the final values.

        Returns False (and writes nothing) if the session already reached a
        terminal status.
        """
        now = datetime.now(timezone.utc)
        try:
            with self.get_session() as session:
                result = session.execute(
                    update(DBCrawlSession)
                    .where(
                        DBCrawlSession.session_id == session_id,
                        DBCrawlSession.status == STATUS_IN_PROGRESS,
                    )
                    .values(
                        status=STATUS_COMPLETED,
                        completed_at=now,
                        total_urls_scraped=total_urls_scraped,
                    )
                )
                if result.rowcount == 0:
                    session.rollback()
                    logger.warning("Crawl session %s is not in progress; finalize skipped", session_id)
                    return False
                self._replace_children(session, session_id, visited_urls, failed_urls, scraped_page_ids)
                session.commit()
                return True
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Could not finalize crawl session {session_id}: {e}") from e

    def mark_failed(self, session_id: int, error_message: str) -> bool:
        now = datetime.now(timezone.utc)
        try:
            with self.get_session() as session:
                result = session.execute(
                    update(DBCrawlSession)
                    .where(
                        DBCrawlSession.session_id == session_id,
                        DBCrawlSession.status == STATUS_IN_PROGRESS,
                    )
                    .values(status=STATUS_FAILED, completed_at=now, error_message=error_message)
                )
                session.commit()
                return result.rowcount > 0
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Could not mark crawl session {session_id} failed: {e}") from e

    def _to_domain(self, session, row: DBCrawlSession) -> CrawlSession:
        url_rows = session.execute(
            select(DBCrawlSessionUrl)
            .where(DBCrawlSessionUrl.session_id == row.session_id)
            .order_by(DBCrawlSessionUrl.id)
        ).scalars().all()
        page_ids = session.execute(
            select(DBCrawlSessionPage.page_id)
            .where(DBCrawlSessionPage.session_id == row.session_id)
            .order_by(DBCrawlSessionPage.id)
        ).scalars().all()
        return CrawlSession(
            session_id=row.session_id,
            site_id=row.site_id,
            user_id=row.user_id,
            start_url=row.start_url,
            status=row.status,
            total_urls_scraped=row.total_urls_scraped,
            visited_urls=[u.url for u in url_rows if u.kind == KIND_VISITED],
            failed_urls=[u.url for u in url_rows if u.kind == KIND_FAILED],
            scraped_page_ids=list(page_ids),
            created_at=row.created_at,
            updated_at=row.updated_at,
            completed_at=row.completed_at,
            error_message=row.error_message,
        )

    def get(self, session_id: int) -> Optional[CrawlSession]:
        try:
            with self.get_session() as session:
                row = session.execute(
                    select(DBCrawlSession).where(DBCrawlSession.session_id == session_id)
                ).scalars().first()
                if not row:
                    return None
                return self._to_domain(session, row)
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Could not load crawl session {session_id}: {e}") from e

    def list_sessions(self, site_id: Optional[str] = None, user_id: Optional[str] = None, limit: int = 20) -> List[CrawlSession]:
        """Return recent sessions (most recent first)."""
        try:
            with self.get_session() as session:
                q = select(DBCrawlSession)
                if site_id is not None:
                    q = q.where(DBCrawlSession.site_id == site_id)
                if user_id is not None:
                    q = q.where(DBCrawlSession.user_id == user_id)
                q = q.order_by(DBCrawlSession.session_id.desc()).limit(limit)
                rows = session.execute(q).scalars().all()
                return [self._to_domain(session, row) for row in rows]
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Could not list crawl sessions: {e}") from e
