import logging
from typing import Callable, List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from seocrawl.domain import RenderedPage

logger = logging.getLogger(__name__)

_HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
_SKIPPED_HREF_PREFIXES = ("javascript:", "mailto:", "tel:")


def _text(el) -> str:
    return el.get_text(separator=" ", strip=True)


def _meta(soup: BeautifulSoup, name: str) -> Optional[str]:
    tag = soup.find("meta", attrs={"name": name})
    if tag and tag.get("content"):
        content = str(tag["content"]).strip()
        return content or None
    return None


class PageContentExtractor:
    """Builds a `RenderedPage` from a rendered HTML document.

    Link, image and form URLs are resolved against the page URL so every
    discovered link is absolute.
    """

    def __init__(
        self,
        soup_factory: Optional[Callable[[str], BeautifulSoup]] = None,
    ):
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))

    def extract(self, url: str, html: str, title: Optional[str] = None) -> RenderedPage:
        soup = self._soup_factory(html)
        if title is None and soup.title is not None:
            title = soup.title.get_text(strip=True)
        keywords_raw = _meta(soup, "keywords")
        body = soup.body or soup
        return RenderedPage(
            url=url,
            raw_markup=html,
            title=title or None,
            meta_description=_meta(soup, "description"),
            author=_meta(soup, "author"),
            keywords=[k.strip() for k in keywords_raw.split(",") if k.strip()] if keywords_raw else [],
            headings=self._headings(soup),
            paragraphs=[t for t in (_text(p) for p in soup.find_all("p")) if t],
            links=self._links(soup, url),
            images=self._images(soup, url),
            lists=self._lists(soup),
            tables=self._tables(soup),
            text_content=[body.get_text(separator="\n", strip=True)] if body is not None else [],
            navigation=self._blocks(soup, "nav"),
            header=self._blocks(soup, "header"),
            footer=self._blocks(soup, "footer"),
            main=self._blocks(soup, "main"),
            articles=self._blocks(soup, "article"),
            sections=self._blocks(soup, "section"),
            forms=self._forms(soup, url),
        )

    def _headings(self, soup: BeautifulSoup) -> List[dict]:
        headings = []
        for el in soup.find_all(_HEADING_TAGS):
            text = _text(el)
            if not text:
                continue
            headings.append({"level": el.name, "text": text, "id": el.get("id") or None})
        return headings

    def _links(self, soup: BeautifulSoup, base_url: str) -> List[dict]:
        links = []
        for a in soup.find_all("a", href=True):
            href = str(a["href"]).strip()
            if not href or href.lower().startswith(_SKIPPED_HREF_PREFIXES):
                continue
            try:
                abs_url = urljoin(base_url, href)
            except ValueError:
                logger.debug("Skipping unparseable href %r on %s", href, base_url)
                continue
            if urlparse(abs_url).scheme not in ("http", "https"):
                continue
            links.append({"url": abs_url, "text": _text(a), "title": a.get("title") or None})
        return links

    def _images(self, soup: BeautifulSoup, base_url: str) -> List[dict]:
        images = []
        for img in soup.find_all("img"):
            src = img.get("src") or img.get("data-src")
            if not src:
                continue
            alt = (img.get("alt") or "").strip()
            title = (img.get("title") or "").strip()
            images.append({"src": urljoin(base_url, src), "alt": alt or None, "title": title or None})
        return images

    def _lists(self, soup: BeautifulSoup) -> List[List[str]]:
        return [
            [t for t in (_text(li) for li in lst.find_all("li")) if t]
            for lst in soup.find_all(["ul", "ol"])
        ]

    def _tables(self, soup: BeautifulSoup) -> List[List[List[str]]]:
        tables = []
        for table in soup.find_all("table"):
            rows = []
            for tr in table.find_all("tr"):
                rows.append([t for t in (_text(cell) for cell in tr.find_all(["th", "td"])) if t])
            tables.append(rows)
        return tables

    def _blocks(self, soup: BeautifulSoup, tag: str) -> List[str]:
        return [t for t in (_text(el) for el in soup.find_all(tag)) if t]

    def _forms(self, soup: BeautifulSoup, base_url: str) -> List[dict]:
        forms = []
        for form in soup.find_all("form"):
            action = form.get("action")
            fields = [
                {"tag": field.name, "name": field.get("name"), "type": field.get("type")}
                for field in form.find_all(["input", "select", "textarea", "button"])
            ]
            forms.append({
                "action": urljoin(base_url, action) if action else None,
                "method": (form.get("method") or "get").lower(),
                "fields": fields,
            })
        return forms
