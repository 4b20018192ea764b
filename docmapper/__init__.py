"""
docmapper
=========

Document lifecycle, hooks, pagination and update building on top of pymongo.
"""
from docmapper.application.builders import QueryFilter, UpdateManyBuilder
from docmapper.core.exceptions import (
    DocMapperError,
    DocumentAlreadySetUpError,
    DocumentNotFoundError,
    DocumentNotSetUpError,
    EmptyFilterFieldError,
    EmptyUpdateError,
    HookError,
    InvalidProjectionError,
    InvalidTargetError,
    PreconditionError,
    StoreInitializationError,
)
from docmapper.domain.constants import DocumentFields, Operator
from docmapper.domain.models import (
    AggregationPaginatedResult,
    Document,
    FormattedTimestamp,
    PageOptions,
    PaginatedResult,
    Paginator,
)
from docmapper.infrastructure.db import MongoConnection, MongoDocumentRepository, connect

__all__ = [
    "AggregationPaginatedResult",
    "DocMapperError",
    "Document",
    "DocumentAlreadySetUpError",
    "DocumentFields",
    "DocumentNotFoundError",
    "DocumentNotSetUpError",
    "EmptyFilterFieldError",
    "EmptyUpdateError",
    "FormattedTimestamp",
    "HookError",
    "InvalidProjectionError",
    "InvalidTargetError",
    "MongoConnection",
    "MongoDocumentRepository",
    "Operator",
    "PageOptions",
    "PaginatedResult",
    "Paginator",
    "PreconditionError",
    "QueryFilter",
    "StoreInitializationError",
    "UpdateManyBuilder",
    "connect",
]
