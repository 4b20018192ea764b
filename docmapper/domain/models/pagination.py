"""
Pagination Models
=================

Offset/limit pagination state and the result containers returned by the
paginated repository operations.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pymongo.cursor import Cursor

DEFAULT_PAGE_NUMBER = 1
DEFAULT_PER_PAGE_ROWS = 20


class PageOptions(BaseModel):
    """Requested page. Out-of-range values are normalized by Paginator."""
    page: int = Field(default=DEFAULT_PAGE_NUMBER, description="1-based page number")
    per_page: int = Field(default=DEFAULT_PER_PAGE_ROWS, description="Rows per page")


class Paginator(BaseModel):
    """
    Derived pagination state.

    Offset is computed from the request; the total/prev/next fields are only
    meaningful once total_rows has been populated from a count.
    """
    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(default=DEFAULT_PAGE_NUMBER, alias="currentPage")
    next_page: int = Field(default=0, alias="nextPage")
    prev_page: int = Field(default=0, alias="prevPage")
    total_pages: int = Field(default=0, alias="totalPages")
    total_rows: int = Field(default=0, alias="totalRows")
    per_page: int = Field(default=DEFAULT_PER_PAGE_ROWS, alias="perPage")
    offset: int = Field(default=0, exclude=True)

    @classmethod
    def from_options(cls, options: PageOptions) -> "Paginator":
        current_page = DEFAULT_PAGE_NUMBER if options.page <= 1 else options.page
        per_page = DEFAULT_PER_PAGE_ROWS if options.per_page < 1 else options.per_page
        return cls(current_page=current_page, per_page=per_page)

    def set_offset(self) -> None:
        if self.current_page == 1:
            self.offset = 0
            return
        self.offset = (self.current_page - 1) * self.per_page

    def set_total_pages(self) -> None:
        if self.total_rows == 0:
            self.total_pages = 0
            return
        self.total_pages = math.ceil(self.total_rows / self.per_page)

    def set_prev_page(self) -> None:
        self.set_total_pages()

        if self.current_page == 1:
            self.prev_page = 0
            return
        self.prev_page = self.current_page - 1

    def set_next_page(self) -> None:
        self.set_total_pages()

        # Already on the last page: stay there
        if self.current_page == self.total_pages:
            self.next_page = self.current_page
        else:
            self.next_page = self.current_page + 1

    def update_totals(self, total_rows: int) -> None:
        """Store a fresh row count and recompute total, prev and next pages."""
        self.total_rows = total_rows
        self.set_total_pages()
        self.set_prev_page()
        self.set_next_page()

    def to_response(self) -> Dict[str, int]:
        """JSON-ready view using camelCase keys (offset is hidden)."""
        return self.model_dump(by_alias=True)


@dataclass
class PaginatedResult:
    """
    A page of find() results.

    The cursor is owned by the caller and must be closed after reading,
    either with close() or by using the result as a context manager.
    """
    paginator: Paginator
    cursor: Cursor

    def close(self) -> None:
        self.cursor.close()

    def __enter__(self) -> "PaginatedResult":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


@dataclass
class AggregationPaginatedResult:
    """A page of aggregation results; data is already fully read."""
    paginator: Paginator
    data: List[Dict[str, Any]] = field(default_factory=list)
