from collections import deque
from typing import Deque, Optional, Set

from seocrawl.utils.url_utils import strip_fragment


class Frontier:
    """FIFO queue of discovered URLs awaiting a visit.

    Entries keep their original form (the renderer receives it unchanged);
    membership is tested on the fragment-stripped form so the same page is
    never queued twice.
    """

    def __init__(self, seed: Optional[str] = None):
        self._queue: Deque[str] = deque()
        self._pending: Set[str] = set()
        if seed is not None:
            self.push(seed)

    def push(self, url: str) -> bool:
        key = strip_fragment(url)
        if key in self._pending:
            return False
        self._queue.append(url)
        self._pending.add(key)
        return True

    def pop(self) -> str:
        url = self._queue.popleft()
        self._pending.discard(strip_fragment(url))
        return url

    def contains(self, url: str) -> bool:
        return strip_fragment(url) in self._pending

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)
