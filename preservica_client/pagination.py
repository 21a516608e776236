"""Follow next-page links until a listing is exhausted."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import TypeVar

from preservica_client.error import PaginationLimitError
from preservica_client.model.page import Page

logger = logging.getLogger(__name__)

T = TypeVar("T")
D = TypeVar("D")  # Response document: an XML Element or decoded JSON

Fetch = Callable[[str], Awaitable[D]]
ParsePage = Callable[[D], Page[T]]


async def iter_pages(
    first_url: str,
    fetch: Fetch[D],
    parse_page: ParsePage[D, T],
    max_pages: int | None = None,
) -> AsyncIterator[Page[T]]:
    """Yield pages in server order, one request at a time.

    An empty page that still carries a next link is followed. Errors from
    fetch or parse_page propagate and end the iteration.
    """
    url: str | None = first_url
    fetched = 0
    while url is not None:
        if max_pages is not None and fetched >= max_pages:
            raise PaginationLimitError(first_url, max_pages)
        logger.debug("Fetching page %d: %s", fetched + 1, url)
        page = parse_page(await fetch(url))
        fetched += 1
        yield page
        url = page.next_page_url


async def drain(
    first_url: str,
    fetch: Fetch[D],
    parse_page: ParsePage[D, T],
    max_pages: int | None = None,
) -> list[T]:
    """Collect the items of every page into one list.

    Nothing is returned if any page fails; partial results are discarded.
    """
    items: list[T] = []
    async for page in iter_pages(first_url, fetch, parse_page, max_pages):
        items.extend(page.items)
    return items
