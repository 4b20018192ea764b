"""
Document Hooks
==============

Optional lifecycle hooks. A document opts into a hook by inheriting the
matching interface; the repository checks for it with isinstance() and
skips hooks a document does not implement:

    @dataclass
    class User(Document, PreCreator):
        def pre_create(self, database: Database) -> None:
            ...

Every hook receives the active database and may raise to abort the
enclosing operation.
"""
from abc import ABC, abstractmethod

from pymongo.database import Database


class PreCreator(ABC):
    @abstractmethod
    def pre_create(self, database: Database) -> None:
        """Runs before a new document is inserted."""


class PostCreator(ABC):
    @abstractmethod
    def post_create(self, database: Database) -> None:
        """Runs after a new document is inserted successfully."""


class PreUpdater(ABC):
    @abstractmethod
    def pre_update(self, database: Database) -> None:
        """Runs before an existing document is replaced."""


class PostUpdater(ABC):
    @abstractmethod
    def post_update(self, database: Database) -> None:
        """Runs after an existing document is replaced successfully."""


class PreSoftDeleter(ABC):
    @abstractmethod
    def pre_soft_delete(self, database: Database) -> None:
        """Runs before a document is soft deleted."""


class PostSoftDeleter(ABC):
    @abstractmethod
    def post_soft_delete(self, database: Database) -> None:
        """Runs after a document is soft deleted."""


class PreHardDeleter(ABC):
    @abstractmethod
    def pre_hard_delete(self, database: Database) -> None:
        """Runs before a document is hard deleted."""


class PostHardDeleter(ABC):
    @abstractmethod
    def post_hard_delete(self, database: Database) -> None:
        """Runs after a document is hard deleted."""


class PreFindOne(ABC):
    @abstractmethod
    def pre_find_one(self, database: Database) -> None:
        """Runs before any find_one*() read into this document."""


class PostFindOne(ABC):
    @abstractmethod
    def post_find_one(self, database: Database) -> None:
        """Runs after a document was found and decoded into this instance."""
