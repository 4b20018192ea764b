"""
Document Repository Interface
=============================

Abstract interface for document persistence operations.
Implementations should be in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from bson import ObjectId
from pymongo.client_session import ClientSession
from pymongo.command_cursor import CommandCursor
from pymongo.cursor import Cursor
from pymongo.results import DeleteResult, UpdateResult

from docmapper.application.builders.update_many_builder import UpdateManyBuilder
from docmapper.domain.models.document import Document
from docmapper.domain.models.pagination import (
    AggregationPaginatedResult,
    PageOptions,
    PaginatedResult,
)

Filters = Sequence[Tuple[str, Any]]
Sort = Sequence[Tuple[str, int]]
Target = Union[Document, Dict[str, Any]]


class DocumentRepository(ABC):
    """
    Abstract repository for document lifecycle operations.

    Every operation accepts an optional session that is passed through to
    each store call.
    """

    @abstractmethod
    def find_one(
        self,
        collection: str,
        filters: Filters,
        projection: Optional[Mapping[str, Any]],
        target: Target,
        *,
        session: Optional[ClientSession] = None,
    ) -> Target:
        """
        Find a single document matching the filters and decode it into target.

        Args:
            collection: Collection name
            filters: Ordered (field, value) constraints
            projection: Field selection mapping, or None for all fields
            target: Document instance (or mutable mapping) to decode into

        Returns:
            The populated target

        Raises:
            DocumentNotFoundError: if nothing matches
        """
        pass

    @abstractmethod
    def find_one_by_id(
        self,
        collection: str,
        document_id: ObjectId,
        projection: Optional[Mapping[str, Any]],
        target: Target,
        *,
        session: Optional[ClientSession] = None,
    ) -> Target:
        """Find a non-deleted document by its id and decode it into target."""
        pass

    @abstractmethod
    def find_one_by_field(
        self,
        collection: str,
        field: str,
        value: Any,
        projection: Optional[Mapping[str, Any]],
        target: Target,
        *,
        session: Optional[ClientSession] = None,
    ) -> Target:
        """Find a non-deleted document whose field equals value."""
        pass

    @abstractmethod
    def find_paginated(
        self,
        collection: str,
        page_options: PageOptions,
        filters: Filters,
        projection: Optional[Mapping[str, Any]] = None,
        sort: Optional[Sort] = None,
        *,
        session: Optional[ClientSession] = None,
    ) -> PaginatedResult:
        """
        Find one page of documents matching the filters.

        Returns:
            PaginatedResult whose cursor the caller must close
        """
        pass

    @abstractmethod
    def find_last(
        self,
        collection: str,
        filters: Filters,
        projection: Optional[Mapping[str, Any]],
        target: Target,
        *,
        session: Optional[ClientSession] = None,
    ) -> Target:
        """Decode the most recent matching document into target."""
        pass

    @abstractmethod
    def find_last_n(
        self,
        collection: str,
        limit: int,
        filters: Filters,
        projection: Optional[Mapping[str, Any]] = None,
        *,
        session: Optional[ClientSession] = None,
    ) -> Cursor:
        """Return a cursor over the N most recent matching documents."""
        pass

    @abstractmethod
    def find_all(
        self,
        collection: str,
        filters: Filters,
        projection: Optional[Mapping[str, Any]] = None,
        sort: Optional[Sort] = None,
        *,
        session: Optional[ClientSession] = None,
    ) -> Cursor:
        """Return a cursor over every matching document."""
        pass

    @abstractmethod
    def save_document(self, collection: str, doc: Document, *, session: Optional[ClientSession] = None) -> Document:
        """
        Insert a new document or replace an existing one.

        Raises:
            DocumentNotSetUpError: if setup() was never called
        """
        pass

    @abstractmethod
    def update_many(
        self,
        collection: str,
        filters: Filters,
        update_builder: UpdateManyBuilder,
        update_options: Optional[Mapping[str, Any]] = None,
        *,
        session: Optional[ClientSession] = None,
    ) -> UpdateResult:
        """Apply the builder's operations to every matching document."""
        pass

    @abstractmethod
    def count_documents(
        self,
        collection: str,
        filters: Union[Filters, Mapping[str, Any]],
        *,
        session: Optional[ClientSession] = None,
    ) -> int:
        """Count documents matching the filters."""
        pass

    @abstractmethod
    def soft_delete_document(self, collection: str, doc: Document, *, session: Optional[ClientSession] = None) -> Document:
        """Mark a document as deleted without removing it."""
        pass

    @abstractmethod
    def hard_delete_document(self, collection: str, doc: Document, *, session: Optional[ClientSession] = None) -> DeleteResult:
        """Permanently remove a document."""
        pass

    @abstractmethod
    def aggregate(
        self,
        collection: str,
        pipeline: List[Mapping[str, Any]],
        aggregate_options: Optional[Mapping[str, Any]] = None,
        *,
        session: Optional[ClientSession] = None,
    ) -> CommandCursor:
        """Run an aggregation pipeline."""
        pass

    @abstractmethod
    def aggregate_paginated(
        self,
        collection: str,
        page_options: PageOptions,
        pipeline: List[Mapping[str, Any]],
        aggregate_options: Optional[Mapping[str, Any]] = None,
        *,
        session: Optional[ClientSession] = None,
    ) -> AggregationPaginatedResult:
        """Run an aggregation pipeline and return one page of its output."""
        pass
