import math
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")

PAGE_SIZES = (10, 50, 100, 200, 500)
DEFAULT_PAGE_SIZE = 50


def check_page_size(page_size: int) -> int:
    if page_size not in PAGE_SIZES:
        raise ValueError(f"Page size must be one of {PAGE_SIZES}, got {page_size}")
    return page_size


class PaginationView(Generic[T]):
    """Slices a filtered sequence into pages.

    The current page always stays within ``[1, page_count]``. With nothing to
    show the view reports "Page 0 of 0" while ``current_page`` stays 1.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        self.page_size = check_page_size(page_size)
        self.current_page = 1
        self._items: Sequence[T] = ()

    @property
    def total(self) -> int:
        return len(self._items)

    @property
    def page_count(self) -> int:
        return math.ceil(self.total / self.page_size)

    @property
    def display_page(self) -> int:
        return self.current_page if self.page_count else 0

    @property
    def label(self) -> str:
        return f"Page {self.display_page} of {self.page_count}"

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.page_count

    @property
    def start(self) -> int:
        return (self.current_page - 1) * self.page_size

    @property
    def items(self) -> list[T]:
        return list(self._items[self.start:self.start + self.page_size])

    def _clamp(self, page: int) -> int:
        return max(1, min(page, max(self.page_count, 1)))

    def update(self, items: Sequence[T], reset: bool = False):
        """Swap in a new filtered sequence; ``reset`` goes back to page 1, otherwise the page is clamped."""
        self._items = items
        self.current_page = 1 if reset else self._clamp(self.current_page)

    def set_page_size(self, page_size: int):
        self.page_size = check_page_size(page_size)
        self.current_page = 1

    def go_to(self, page: int) -> int:
        self.current_page = self._clamp(page)
        return self.current_page

    def next(self) -> int:
        if self.has_next:
            self.current_page += 1
        return self.current_page

    def previous(self) -> int:
        if self.has_previous:
            self.current_page -= 1
        return self.current_page
