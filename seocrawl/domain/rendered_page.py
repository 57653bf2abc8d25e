from typing import Any, Dict, List, NamedTuple, Optional


class RenderedPage(NamedTuple):
    """Output of a page renderer: the rendered document plus extracted structure.

    All URLs in `links` are absolute.
    """
    url: str
    raw_markup: str
    title: Optional[str] = None
    meta_description: Optional[str] = None
    author: Optional[str] = None
    keywords: List[str] = []
    headings: List[Dict[str, Any]] = []
    paragraphs: List[str] = []
    links: List[Dict[str, Any]] = []
    images: List[Dict[str, Any]] = []
    lists: List[List[str]] = []
    tables: List[List[List[str]]] = []
    text_content: List[str] = []
    navigation: List[Any] = []
    header: List[Any] = []
    footer: List[Any] = []
    main: List[Any] = []
    articles: List[Any] = []
    sections: List[Any] = []
    forms: List[Any] = []

    def link_urls(self) -> List[str]:
        return [link["url"] for link in self.links if link.get("url")]
