from typing import List

from seocrawl.utils.url_utils import strip_fragment


class VisitedTracker:
    """
    Tracks which URLs have been dequeued during a single crawl.

    URLs are keyed on their fragment-stripped form so that ``/page#a`` and
    ``/page`` count as the same page. Insertion order is kept, which gives
    the visitation order of the crawl.
    """

    def __init__(self):
        self._visited: "dict[str, None]" = {}

    def mark(self, url: str) -> str:
        """Mark a URL as visited and return its normalized form."""
        key = strip_fragment(url)
        self._visited.setdefault(key, None)
        return key

    def is_visited(self, url: str) -> bool:
        return strip_fragment(url) in self._visited

    def urls(self) -> List[str]:
        return list(self._visited)

    def __len__(self) -> int:
        return len(self._visited)
