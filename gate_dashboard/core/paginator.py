import math
from typing import Iterator, Sequence

from gate_dashboard.core.models import FlatRow, Page

DEFAULT_PAGE_SIZE = 10


class Paginator:
    """Slice flattened rows into fixed-size pages, clamping out-of-range requests."""

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.page_size = page_size

    def total_pages(self, row_count: int) -> int:
        return math.ceil(max(row_count, 0) / self.page_size)

    def clamp(self, page: int, row_count: int) -> int:
        last_page = max(self.total_pages(row_count), 1)
        return min(max(page, 1), last_page)

    def paginate(self, rows: Sequence[FlatRow], page: int = 1) -> Page:
        page_number = self.clamp(page, len(rows))
        offset = (page_number - 1) * self.page_size
        return Page(
            rows=list(rows[offset : offset + self.page_size]),
            page_number=page_number,
            total_pages=self.total_pages(len(rows)),
            total_rows=len(rows),
            page_size=self.page_size,
        )

    def iter_pages(self, rows: Sequence[FlatRow]) -> Iterator[Page]:
        for page_number in range(1, max(self.total_pages(len(rows)), 1) + 1):
            yield self.paginate(rows, page_number)
