from datetime import datetime
from typing import Any, Dict, List, Optional

# Structural buckets stored as JSON sequences; each defaults to [].
SEQUENCE_FIELDS = (
    "keywords",
    "headings",
    "paragraphs",
    "links",
    "images",
    "lists",
    "tables",
    "text_content",
    "navigation",
    "header",
    "footer",
    "main",
    "articles",
    "sections",
    "forms",
)

MARKUP_FIELDS = ("raw_markup", "optimized_markup")


class PageRecord:
    def __init__(
        self,
        page_id: Optional[int] = None,
        page_identifier: Optional[str] = None,
        session_id: Optional[int] = None,
        url: Optional[str] = None,
        site_id: Optional[str] = None,
        user_id: Optional[str] = None,
        title: Optional[str] = None,
        meta_description: Optional[str] = None,
        author: Optional[str] = None,
        raw_markup: Optional[str] = None,
        optimized_markup: Optional[str] = None,
        file_size: int = 0,
        extraction_method: Optional[str] = None,
        scraped_at: Optional[datetime] = None,
        saved_at: Optional[datetime] = None,
        **sequences: List[Any],
    ):
        unknown = set(sequences) - set(SEQUENCE_FIELDS)
        if unknown:
            raise TypeError(f"Unknown page record fields: {sorted(unknown)}")
        self.page_id = page_id
        self.page_identifier = page_identifier
        self.session_id = session_id
        self.url = url
        self.site_id = site_id
        self.user_id = user_id
        self.title = title
        self.meta_description = meta_description
        self.author = author
        self.raw_markup = raw_markup
        self.optimized_markup = optimized_markup
        self.file_size = file_size
        self.extraction_method = extraction_method
        self.scraped_at = scraped_at
        self.saved_at = saved_at
        for name in SEQUENCE_FIELDS:
            setattr(self, name, list(sequences.get(name) or []))

    def to_dict(self, include_markup: bool = True) -> Dict[str, Any]:
        d = dict(self.__dict__)
        if not include_markup:
            for name in MARKUP_FIELDS:
                d.pop(name, None)
        return d

    def __repr__(self):
        return f"<PageRecord id={self.page_id} session={self.session_id} url={self.url}>"
