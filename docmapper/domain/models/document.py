"""
Document Model
==============

Base class for every persistable document.

Concrete documents are dataclasses that inherit Document and give every
field a default, so an empty instance can be created and decoded into:

    @dataclass
    class User(Document):
        first_name: str = ""
        level: int = 0

A document must be set up exactly once with setup() before it can be saved.
"""
from dataclasses import asdict, dataclass, field, fields, is_dataclass
from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, get_args, get_type_hints

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from docmapper.core.exceptions import DocumentAlreadySetUpError
from docmapper.domain.constants.document_fields import DocumentFields
from docmapper.utils.datetime_utils import (
    DATE_SHORT_LAYOUT,
    DATE_TIME_SHORT_LAYOUT,
    format_date,
    now,
    to_iso,
)

TDocument = TypeVar("TDocument", bound="Document")

# Field metadata flag for attributes that are never written to the store
TRANSIENT = {"transient": True}


def _encode(value: Any) -> Any:
    """Turn nested dataclasses (also inside lists and dicts) into plain BSON values."""
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    if isinstance(value, dict):
        return {key: _encode(item) for key, item in value.items()}
    return value


def _contains_dataclass(hint: Any) -> bool:
    if isinstance(hint, type) and is_dataclass(hint):
        return True
    return any(_contains_dataclass(arg) for arg in get_args(hint))


@lru_cache(maxsize=None)
def _adapter(hint: Any) -> TypeAdapter:
    return TypeAdapter(hint)


class FormattedTimestamp(BaseModel):
    """Display-ready renditions of a single timestamp."""
    model_config = ConfigDict(populate_by_name=True)

    date_short: str = Field(..., alias="dateShort")
    date_time_short: str = Field(..., alias="dateTimeShort")
    iso: str


@dataclass
class Document:
    """
    Shared document properties and lifecycle behaviour.

    is_new is per in-memory instance: True after setup(), False once the
    document has been inserted or loaded from the store.
    """
    id: Optional[ObjectId] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    is_deleted: bool = False
    _is_new: bool = field(default=False, init=False, repr=False, compare=False, metadata=TRANSIENT)

    def setup(self) -> None:
        """
        Initialize a new document with an id and timestamps.

        Raises:
            DocumentAlreadySetUpError: if the document already has an id
        """
        if self.id is not None:
            raise DocumentAlreadySetUpError()
        timestamp = now()
        self.id = ObjectId()
        self.created_at = timestamp
        self.updated_at = timestamp
        self._is_new = True

    def can_save(self) -> bool:
        return self.id is not None and self.created_at is not None and self.updated_at is not None

    def before_update(self) -> None:
        self.updated_at = now()

    def before_soft_delete(self) -> None:
        self.is_deleted = True
        self.deleted_at = now()

    def get_id(self) -> Optional[ObjectId]:
        return self.id

    def get_created_at(self) -> Optional[datetime]:
        return self.created_at

    def get_updated_at(self) -> Optional[datetime]:
        return self.updated_at

    def is_new(self) -> bool:
        return self._is_new

    def set_is_new(self, status: bool) -> None:
        """
        Mark whether this instance has been stored yet.

        True makes the next save_document() insert; False makes it replace.
        """
        self._is_new = status

    # Mapping to and from stored documents

    @staticmethod
    def _storage_key(name: str) -> str:
        return DocumentFields.ID if name == DocumentFields.ID_ATTRIBUTE else name

    def to_document(self) -> Dict[str, Any]:
        """Convert the document to the mapping written to MongoDB."""
        doc: Dict[str, Any] = {}
        for f in fields(self):
            if f.metadata.get("transient"):
                continue
            value = getattr(self, f.name)
            # _id and deleted_at are omitted until they have a value
            if value is None and f.name in (DocumentFields.ID_ATTRIBUTE, DocumentFields.DELETED_AT):
                continue
            doc[self._storage_key(f.name)] = _encode(value)
        return doc

    def load_document(self, raw: Mapping[str, Any]) -> None:
        """
        Decode a stored mapping into this instance.

        Keys missing from raw (e.g. excluded by a projection) leave the
        current attribute untouched; unknown keys are ignored. Fields typed
        with dataclasses (directly or inside containers) are rebuilt from
        their type hints.
        """
        hints = get_type_hints(type(self))
        for f in fields(self):
            if f.metadata.get("transient"):
                continue
            key = self._storage_key(f.name)
            if key not in raw:
                continue
            value = raw[key]
            hint = hints.get(f.name)
            if hint is not None and _contains_dataclass(hint):
                value = _adapter(hint).validate_python(value)
            setattr(self, f.name, value)
        self._is_new = False

    @classmethod
    def from_document(cls: Type[TDocument], raw: Mapping[str, Any]) -> TDocument:
        """Build an instance from a raw cursor row."""
        instance = cls()
        instance.load_document(raw)
        return instance

    # Timestamp formatting

    def format_date(self, dt: datetime, layout: str) -> str:
        return format_date(dt, layout)

    def format_date_short(self, dt: datetime) -> str:
        """Format as MMM DD, YYYY."""
        return format_date(dt, DATE_SHORT_LAYOUT)

    def format_date_time_short(self, dt: datetime) -> str:
        """Format as MMM DD, YYYY - HH:MM."""
        return format_date(dt, DATE_TIME_SHORT_LAYOUT)

    def _format_timestamp(self, dt: Optional[datetime]) -> Optional[FormattedTimestamp]:
        if dt is None:
            return None
        return FormattedTimestamp(
            date_short=self.format_date_short(dt),
            date_time_short=self.format_date_time_short(dt),
            iso=to_iso(dt),
        )

    def get_formatted_created_at(self) -> Optional[FormattedTimestamp]:
        return self._format_timestamp(self.created_at)

    def get_formatted_updated_at(self) -> Optional[FormattedTimestamp]:
        return self._format_timestamp(self.updated_at)

    def get_formatted_deleted_at(self) -> Optional[FormattedTimestamp]:
        return self._format_timestamp(self.deleted_at)

    def get_timestamps(self) -> Dict[str, FormattedTimestamp]:
        """Formatted created/updated timestamps, keyed createdAt/updatedAt."""
        timestamps: Dict[str, FormattedTimestamp] = {}
        created_at = self.get_formatted_created_at()
        if created_at is not None:
            timestamps["createdAt"] = created_at
        updated_at = self.get_formatted_updated_at()
        if updated_at is not None:
            timestamps["updatedAt"] = updated_at
        return timestamps

    def get_all_timestamps(self) -> Dict[str, FormattedTimestamp]:
        """Like get_timestamps(), plus deletedAt once the document is soft-deleted."""
        timestamps = self.get_timestamps()
        deleted_at = self.get_formatted_deleted_at()
        if deleted_at is not None:
            timestamps["deletedAt"] = deleted_at
        return timestamps
