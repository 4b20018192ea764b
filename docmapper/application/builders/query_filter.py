"""
Query Filter Builder
====================

Accumulates an ordered list of (field, value) equality constraints.

The first entry always constrains the soft-delete flag, so a filter built
with QueryFilter.new() never matches soft-deleted documents.
"""
from typing import Any, List, Tuple

from docmapper.domain.constants.document_fields import DocumentFields

Filter = Tuple[str, Any]


class QueryFilter:
    """
    Chainable filter builder.

    Not safe for concurrent mutation; each caller should own its instance.
    """

    def __init__(self) -> None:
        self._filters: List[Filter] = []

    @classmethod
    def new(cls) -> "QueryFilter":
        """Start a filter that excludes soft-deleted documents."""
        qf = cls()
        qf._filters.append((DocumentFields.IS_DELETED, False))
        return qf

    @classmethod
    def new_including_deleted(cls) -> "QueryFilter":
        """Start a filter that matches soft-deleted documents only."""
        qf = cls()
        qf._filters.append((DocumentFields.IS_DELETED, True))
        return qf

    def add_filter(self, field: str, value: Any) -> "QueryFilter":
        """
        Append a constraint and return the builder so calls can be chained.

        A constraint with an empty field name is dropped.
        """
        if not field:
            return self
        self._filters.append((field, value))
        return self

    def get_filters(self) -> List[Filter]:
        """Return the accumulated constraints in insertion order."""
        return self._filters

    def __len__(self) -> int:
        return len(self._filters)

    def __repr__(self) -> str:
        return f"QueryFilter({self._filters!r})"
