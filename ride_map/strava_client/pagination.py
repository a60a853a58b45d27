"""Lazy pagination over Strava list endpoints."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeAlias

from ..config import MAX_PAGES, PAGE_SIZE

JSONList: TypeAlias = List[Dict[str, Any]]
PageFetcher: TypeAlias = Callable[[int], JSONList]

LOGGER = logging.getLogger(__name__)

__all__ = ["JSONList", "PageFetcher", "Pages", "collect_pages"]


class Pages:
    """Re-iterable sequence of list pages fetched on demand.

    Iteration requests page 1, 2, ... through ``fetch_page`` and stops after the
    first page shorter than ``page_size`` (Strava's end-of-results signal) or
    once ``max_pages`` pages have been yielded. Each new iteration starts again
    from page 1.
    """

    def __init__(
        self,
        fetch_page: PageFetcher,
        *,
        page_size: int = PAGE_SIZE,
        max_pages: Optional[int] = MAX_PAGES,
        context_label: str = "list",
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        if max_pages is not None and max_pages < 1:
            max_pages = None
        self._fetch_page = fetch_page
        self.page_size = page_size
        self.max_pages = max_pages
        self._context_label = context_label

    def is_last(self, data: JSONList) -> bool:
        return len(data) < self.page_size

    def __iter__(self) -> Iterator[JSONList]:
        page = 1
        while True:
            LOGGER.debug("Fetching %s page %s", self._context_label, page)
            data = self._fetch_page(page)
            LOGGER.debug(
                "Received %s items on %s page %s",
                len(data),
                self._context_label,
                page,
            )
            yield data
            if self.is_last(data):
                return
            if self.max_pages is not None and page >= self.max_pages:
                LOGGER.warning(
                    "%s stopped at page cap %s with a full page; results may be incomplete",
                    self._context_label.capitalize(),
                    self.max_pages,
                )
                return
            page += 1


def collect_pages(pages: Pages) -> JSONList:
    """Flatten every page of ``pages`` into one list, in request order."""

    flattened: JSONList = []
    for page in pages:
        flattened.extend(page)
    return flattened
