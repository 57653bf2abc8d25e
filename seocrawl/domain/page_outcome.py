"""Tagged per-page results used by the crawl loop."""
from typing import List, NamedTuple, Union

STAGE_RENDER = "render"
STAGE_EXTRACT = "extract"
STAGE_PERSIST = "persist"


class PageSaved(NamedTuple):
    url: str
    page_id: int
    links: List[str]
    optimized: bool


class PageFailed(NamedTuple):
    url: str
    stage: str
    reason: str
    # links of a page that rendered but could not be saved
    links: List[str] = []


PageOutcome = Union[PageSaved, PageFailed]
