import itertools
import logging
from typing import Iterator, List, Optional

from .normalizer import SearchResultItem

logger = logging.getLogger(__name__)


class ResultSet:
    """The current search results, replaced wholesale by each applied search.

    Each search asks for a request id before it goes out; only a response
    carrying the most recently issued id may replace the contents, so a slow
    earlier search can never overwrite a newer one.
    """

    def __init__(self):
        self.kind: Optional[str] = None
        self.items: List[SearchResultItem] = []
        self._ids = itertools.count(1)
        self._latest_request_id = 0

    def begin_request(self) -> int:
        self._latest_request_id = next(self._ids)
        return self._latest_request_id

    def is_stale(self, request_id: int) -> bool:
        return int(request_id) != self._latest_request_id

    def replace(self, kind: Optional[str], items: List[SearchResultItem], *, request_id: Optional[int] = None) -> bool:
        """Swap in a new result list. Returns False if the response was stale."""

        if request_id is not None and self.is_stale(request_id):
            logger.debug(
                "Discarding stale %s results (request %s, latest %s)",
                kind, request_id, self._latest_request_id,
            )
            return False

        self.kind = kind
        self.items = list(items or [])
        return True

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[SearchResultItem]:
        return iter(self.items)
