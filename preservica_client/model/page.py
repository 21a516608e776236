from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One chunk of a paginated listing.

    A missing next_page_url is the only signal that the listing is complete;
    a page with no items but a next link is still followed.
    """

    items: tuple[T, ...]
    next_page_url: str | None = None
