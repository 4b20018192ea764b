"""
MongoDB Document Repository
===========================

Concrete implementation of DocumentRepository using MongoDB.

Validates arguments, applies the default soft-delete filter, fires document
hooks around each store call and decodes results. Store errors raised by
pymongo are passed through untouched; nothing here retries.

Callers control deadlines by wrapping calls in pymongo.timeout():

    with pymongo.timeout(2):
        repository.find_one_by_id("users", user_id, None, user)
"""
import logging
from collections.abc import Mapping as MappingABC
from collections.abc import MutableMapping
from typing import Any, Dict, List, Mapping, Optional, Union

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.client_session import ClientSession
from pymongo.command_cursor import CommandCursor
from pymongo.cursor import Cursor
from pymongo.database import Database
from pymongo.results import DeleteResult, UpdateResult

from docmapper.application.builders.query_filter import QueryFilter
from docmapper.application.builders.update_many_builder import UpdateManyBuilder
from docmapper.core.exceptions import (
    DocumentNotFoundError,
    DocumentNotSetUpError,
    EmptyFilterFieldError,
    EmptyUpdateError,
    HookError,
    InvalidProjectionError,
    InvalidTargetError,
)
from docmapper.domain.constants.document_fields import DocumentFields
from docmapper.domain.constants.operators import Operator
from docmapper.domain.models.document import Document
from docmapper.domain.models.hooks import (
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
from docmapper.domain.models.pagination import (
    AggregationPaginatedResult,
    PageOptions,
    PaginatedResult,
    Paginator,
)
from docmapper.domain.repositories.document_repository import (
    DocumentRepository,
    Filters,
    Sort,
    Target,
)

logger = logging.getLogger(__name__)

DEFAULT_SORT = [(DocumentFields.ID, DESCENDING)]
DEFAULT_AGGREGATE_OPTIONS = {"allowDiskUse": True}


class MongoDocumentRepository(DocumentRepository):
    """
    MongoDB implementation of DocumentRepository.

    Works against an explicitly supplied database handle; hooks receive the
    same handle.
    """

    def __init__(self, database: Database):
        """Initialize repository with a MongoDB database."""
        self._database = database

    @property
    def database(self) -> Database:
        return self._database

    # Validation and helpers

    @staticmethod
    def _validate_target(target: Any) -> None:
        if isinstance(target, Document) or isinstance(target, MutableMapping):
            return
        raise InvalidTargetError(target)

    @staticmethod
    def _validate_document(doc: Any) -> Document:
        if not isinstance(doc, Document):
            raise InvalidTargetError(doc)
        return doc

    @staticmethod
    def _validate_projection(projection: Any) -> None:
        if projection is not None and not isinstance(projection, MappingABC):
            raise InvalidProjectionError(projection)

    @staticmethod
    def _validate_filters(filters: Filters) -> None:
        for field, _ in filters:
            if not field:
                raise EmptyFilterFieldError()

    @staticmethod
    def _apply_is_deleted_filter(filters: Filters) -> List:
        """Return a copy of filters that also excludes soft-deleted documents,
        unless an is_deleted constraint is already present."""
        filters = list(filters)
        for field, _ in filters:
            if field == DocumentFields.IS_DELETED:
                return filters
        filters.append((DocumentFields.IS_DELETED, False))
        return filters

    @staticmethod
    def _to_query(filters: Filters) -> Dict[str, Any]:
        """
        Render (field, value) constraints as a MongoDB query.

        Repeated field names would collapse in a plain mapping, so they are
        combined with $and instead.
        """
        field_names = [field for field, _ in filters]
        if len(set(field_names)) == len(field_names):
            return {field: value for field, value in filters}
        return {Operator.AND: [{field: value} for field, value in filters]}

    def _id_filters(self, doc: Document) -> List:
        return QueryFilter.new().add_filter(DocumentFields.ID, doc.get_id()).get_filters()

    def _run_hook(self, doc: Any, capability: type, stage: str, method: str) -> None:
        if not isinstance(doc, capability):
            return
        try:
            getattr(doc, method)(self._database)
        except Exception as e:
            logger.error(f"{stage} hook failed for {type(doc).__name__}: {e}")
            raise HookError(stage, e) from e

    @staticmethod
    def _decode(raw: Mapping[str, Any], target: Target) -> None:
        if isinstance(target, Document):
            target.load_document(raw)
        else:
            target.clear()
            target.update(raw)

    # Reads

    def _find_one(
        self,
        collection: str,
        filters: Filters,
        projection: Optional[Mapping[str, Any]],
        target: Target,
        session: Optional[ClientSession],
    ) -> Target:
        self._validate_target(target)

        filters = self._apply_is_deleted_filter(filters)
        self._validate_filters(filters)

        self._run_hook(target, PreFindOne, "PreFindOne", "pre_find_one")

        query = self._to_query(filters)
        logger.debug(f"find_one on {collection}: {query}")
        raw = self._database[collection].find_one(query, projection, session=session)
        if raw is None:
            raise DocumentNotFoundError(collection, query)

        self._decode(raw, target)
        self._run_hook(target, PostFindOne, "PostFindOne", "post_find_one")
        return target

    def find_one(self, collection, filters, projection, target, *, session=None):
        """
        Find a single document that matches the provided filters.

        If projection is None, all fields are returned. To select fields use
        a mapping, eg {"email": 1, "phone": 1}.
        """
        self._validate_projection(projection)
        return self._find_one(collection, filters, projection, target, session)

    def find_one_by_id(self, collection, document_id: ObjectId, projection, target, *, session=None):
        """Find the non-deleted document with the given id."""
        self._validate_projection(projection)
        filters = QueryFilter.new().add_filter(DocumentFields.ID, document_id).get_filters()
        return self._find_one(collection, filters, projection, target, session)

    def find_one_by_field(self, collection, field: str, value: Any, projection, target, *, session=None):
        """
        Find the non-deleted document whose field equals value.

        An empty field name is dropped by the filter builder, so the lookup
        falls back to the first non-deleted document.
        """
        self._validate_projection(projection)
        filters = QueryFilter.new().add_filter(field, value).get_filters()
        return self._find_one(collection, filters, projection, target, session)

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
        Find one page of documents that match the provided filters.

        Sort defaults to newest first (_id descending). REMEMBER TO CLOSE
        THE CURSOR WHEN DONE READING.
        """
        if sort is None:
            sort = DEFAULT_SORT

        filters = self._apply_is_deleted_filter(filters)
        self._validate_filters(filters)
        self._validate_projection(projection)

        paginator = Paginator.from_options(page_options)
        paginator.set_offset()

        query = self._to_query(filters)
        col = self._database[collection]
        total_rows = col.count_documents(query, session=session)
        cursor = col.find(
            query,
            projection,
            skip=paginator.offset,
            limit=paginator.per_page,
            sort=list(sort),
            session=session,
        )

        paginator.update_totals(total_rows)
        return PaginatedResult(paginator=paginator, cursor=cursor)

    def _find_last(
        self,
        collection: str,
        limit: int,
        filters: Filters,
        projection: Optional[Mapping[str, Any]],
        session: Optional[ClientSession],
    ) -> Cursor:
        self._validate_projection(projection)

        filters = self._apply_is_deleted_filter(filters)
        self._validate_filters(filters)

        return self._database[collection].find(
            self._to_query(filters),
            projection,
            limit=limit,
            sort=DEFAULT_SORT,
            session=session,
        )

    def find_last(self, collection, filters, projection, target, *, session=None):
        """
        Decode the most recent document matching the filters into target.

        Recency is taken from the ObjectId, which grows monotonically.
        """
        self._validate_target(target)

        cursor = self._find_last(collection, 1, filters, projection, session)
        try:
            for raw in cursor:
                self._decode(raw, target)
                return target
        finally:
            cursor.close()

        raise DocumentNotFoundError(collection, filters)

    def find_last_n(self, collection, limit, filters, projection=None, *, session=None):
        """Return a cursor over the limit most recent documents matching the filters."""
        return self._find_last(collection, limit, filters, projection, session)

    def find_all(self, collection, filters, projection=None, sort=None, *, session=None):
        """
        Return a cursor over every document matching the filters.

        To be used with care: a large collection can use up a lot of memory.
        """
        if sort is None:
            sort = DEFAULT_SORT

        self._validate_projection(projection)

        filters = self._apply_is_deleted_filter(filters)
        self._validate_filters(filters)

        return self._database[collection].find(
            self._to_query(filters),
            projection,
            sort=list(sort),
            session=session,
        )

    # Writes

    def _replace_document(
        self,
        collection: str,
        filters: Filters,
        doc: Document,
        session: Optional[ClientSession],
    ) -> Dict[str, Any]:
        self._validate_filters(filters)

        doc.before_update()
        query = self._to_query(filters)
        previous = self._database[collection].find_one_and_replace(
            query,
            doc.to_document(),
            return_document=ReturnDocument.BEFORE,
            session=session,
        )
        if previous is None:
            raise DocumentNotFoundError(collection, query)
        return previous

    def save_document(self, collection, doc, *, session=None):
        """
        Create a new document, or replace it if it has been saved before.

        PreCreate/PostCreate hooks fire around an insert and
        PreUpdate/PostUpdate hooks around a replace, when implemented.
        """
        doc = self._validate_document(doc)

        if not doc.can_save():
            raise DocumentNotSetUpError()

        if doc.is_new():
            self._run_hook(doc, PreCreator, "PreCreate", "pre_create")

            self._database[collection].insert_one(doc.to_document(), session=session)
            doc.set_is_new(False)
            logger.debug(f"Inserted {type(doc).__name__} {doc.get_id()} into {collection}")

            self._run_hook(doc, PostCreator, "PostCreate", "post_create")
            return doc

        self._run_hook(doc, PreUpdater, "PreUpdate", "pre_update")

        self._replace_document(collection, self._id_filters(doc), doc, session)
        logger.debug(f"Replaced {type(doc).__name__} {doc.get_id()} in {collection}")

        self._run_hook(doc, PostUpdater, "PostUpdate", "post_update")
        return doc

    def update_many(
        self,
        collection: str,
        filters: Filters,
        update_builder: UpdateManyBuilder,
        update_options: Optional[Mapping[str, Any]] = None,
        *,
        session: Optional[ClientSession] = None,
    ) -> UpdateResult:
        """Update every document matching the filters with the builder's operators."""
        if not update_builder.has_values():
            raise EmptyUpdateError()

        self._validate_filters(filters)

        return self._database[collection].update_many(
            self._to_query(filters),
            update_builder.to_update_document(),
            session=session,
            **dict(update_options or {}),
        )

    def count_documents(
        self,
        collection: str,
        filters: Union[Filters, Mapping[str, Any]],
        *,
        session: Optional[ClientSession] = None,
    ) -> int:
        """Count the documents matching the filters (no soft-delete default)."""
        if isinstance(filters, MappingABC):
            query = dict(filters)
        else:
            query = self._to_query(filters)
        return self._database[collection].count_documents(query, session=session)

    def soft_delete_document(self, collection, doc, *, session=None):
        """
        Mark a document as deleted and set its deleted timestamp.

        The document stays in the collection but is hidden from queries
        unless the filters ask for deleted documents.
        """
        doc = self._validate_document(doc)

        doc.before_soft_delete()
        filters = self._id_filters(doc)

        self._run_hook(doc, PreSoftDeleter, "PreSoftDelete", "pre_soft_delete")

        self._replace_document(collection, filters, doc, session)
        logger.debug(f"Soft deleted {type(doc).__name__} {doc.get_id()} in {collection}")

        self._run_hook(doc, PostSoftDeleter, "PostSoftDelete", "post_soft_delete")
        return doc

    def hard_delete_document(self, collection, doc, *, session=None) -> DeleteResult:
        """
        Permanently remove a document, soft-deleted or not.

        Prefer soft_delete_document() unless the document must truly be gone.
        """
        doc = self._validate_document(doc)

        self._run_hook(doc, PreHardDeleter, "PreHardDelete", "pre_hard_delete")

        result = self._database[collection].delete_one(
            {DocumentFields.ID: doc.get_id()},
            session=session,
        )
        logger.debug(f"Hard deleted {result.deleted_count} document(s) with id {doc.get_id()} from {collection}")

        self._run_hook(doc, PostHardDeleter, "PostHardDelete", "post_hard_delete")
        return result

    # Aggregation

    def _aggregate(
        self,
        collection: str,
        pipeline: List[Mapping[str, Any]],
        aggregate_options: Mapping[str, Any],
        session: Optional[ClientSession],
    ) -> CommandCursor:
        return self._database[collection].aggregate(pipeline, session=session, **dict(aggregate_options))

    def aggregate(self, collection, pipeline, aggregate_options=None, *, session=None):
        """
        Run an aggregation pipeline and return its cursor.

        Without explicit options, allowDiskUse is enabled.
        """
        if aggregate_options is None:
            aggregate_options = DEFAULT_AGGREGATE_OPTIONS
        return self._aggregate(collection, list(pipeline), aggregate_options, session)

    def aggregate_paginated(self, collection, page_options, pipeline, aggregate_options=None, *, session=None):
        """
        Run an aggregation pipeline and return one page of its output.

        A $facet stage computes the total count and the requested window in
        one round trip. An empty result yields a paginator with zero totals.
        """
        if aggregate_options is None:
            aggregate_options = DEFAULT_AGGREGATE_OPTIONS

        paginator = Paginator.from_options(page_options)
        paginator.set_offset()

        facet_stage = {
            Operator.FACET: {
                "meta": [{Operator.COUNT: "total"}],
                "data": [{Operator.SKIP: paginator.offset}, {Operator.LIMIT: paginator.per_page}],
            }
        }
        pipeline = list(pipeline) + [facet_stage]

        result: Dict[str, Any] = {}
        cursor = self._aggregate(collection, pipeline, aggregate_options, session)
        try:
            for row in cursor:
                result = row
        finally:
            cursor.close()

        meta = result.get("meta") or []
        data = result.get("data") or []
        if meta and data:
            paginator.update_totals(meta[0]["total"])

        return AggregationPaginatedResult(paginator=paginator, data=data)
