import mongomock
import pytest

from docmapper.infrastructure.db.mongo_document_repository import MongoDocumentRepository
from docmapper.test.documents import USER_COLLECTION, User


@pytest.fixture
def database():
    client = mongomock.MongoClient()
    yield client["docmapper_test"]
    client.close()


@pytest.fixture
def repository(database):
    return MongoDocumentRepository(database)


@pytest.fixture
def saved_user(repository):
    """A user that has been set up and inserted."""
    user = User(first_name="Joseph", last_name="Cobhams", level=1)
    user.setup()
    repository.save_document(USER_COLLECTION, user)
    return user
