"""
DocMapper Exceptions
====================

Error taxonomy for the document layer.

- PreconditionError and subclasses: local argument/state violations, never retried.
- HookError: a lifecycle hook failed and aborted the enclosing operation.
- DocumentNotFoundError: a single-document read or replace matched nothing.
- StoreInitializationError: the store could not be reached at startup.

Errors raised by pymongo itself (timeouts, network errors, write conflicts)
are not wrapped and reach the caller unchanged.
"""
from typing import Optional


class DocMapperError(Exception):
    """Base class for all per-call document layer errors."""


class PreconditionError(DocMapperError):
    """A local precondition was violated before anything reached the store."""


class InvalidTargetError(PreconditionError):
    """Target is not a mutable document (or mapping) that results can be decoded into."""

    def __init__(self, target: object) -> None:
        super().__init__(
            f"doc must be a Document instance or a mutable mapping, got {type(target).__name__}"
        )
        self.target = target


class InvalidProjectionError(PreconditionError):
    """Projection is not a field-selection mapping."""

    def __init__(self, projection: object) -> None:
        super().__init__(
            f"projections can only be mappings, got {type(projection).__name__}"
        )
        self.projection = projection


class EmptyFilterFieldError(PreconditionError):
    """A filter constraint has an empty field name."""

    def __init__(self) -> None:
        super().__init__("document field names in filters cannot be empty. Key required")


class DocumentNotSetUpError(PreconditionError):
    """Document has no id/timestamps yet and cannot be saved."""

    def __init__(self) -> None:
        super().__init__(
            "cannot save new document. call document.setup() before calling save_document()"
        )


class DocumentAlreadySetUpError(PreconditionError):
    """setup() was called on a document that already has an id."""

    def __init__(self) -> None:
        super().__init__(
            "cannot setup an already existing document. setup() only applies to new documents"
        )


class EmptyUpdateError(PreconditionError):
    """update_many() was given a builder with no operations."""

    def __init__(self) -> None:
        super().__init__("empty UpdateManyBuilder provided")


class HookError(DocMapperError):
    """A lifecycle hook raised; the stage name says which one."""

    def __init__(self, stage: str, error: Exception) -> None:
        super().__init__(f"{stage} Hook Error: {error}")
        self.stage = stage
        self.error = error


class DocumentNotFoundError(DocMapperError):
    """No document matched a single-document operation."""

    def __init__(self, collection: str, filters: Optional[object] = None) -> None:
        message = f"no document found in '{collection}'"
        if filters is not None:
            message += f" matching {filters!r}"
        super().__init__(message)
        self.collection = collection
        self.filters = filters


class StoreInitializationError(RuntimeError):
    """
    Raised when the store cannot be reached during startup.

    Deliberately not a DocMapperError: it is not a per-call failure and
    callers are expected to let it halt the process.
    """
