from .document import Document, FormattedTimestamp
from .hooks import (
    PostCreator,
    PostFindOne,
    PostHardDeleter,
    PostSoftDeleter,
    PostUpdater,
    PreCreator,
    PreFindOne,
    PreHardDeleter,
    PreSoftDeleter,
    PreUpdater,
)
from .pagination import AggregationPaginatedResult, PageOptions, PaginatedResult, Paginator

__all__ = [
    "AggregationPaginatedResult",
    "Document",
    "FormattedTimestamp",
    "PageOptions",
    "PaginatedResult",
    "Paginator",
    "PostCreator",
    "PostFindOne",
    "PostHardDeleter",
    "PostSoftDeleter",
    "PostUpdater",
    "PreCreator",
    "PreFindOne",
    "PreHardDeleter",
    "PreSoftDeleter",
    "PreUpdater",
]
