from .mongo_connection import MongoConnection, connect
from .mongo_document_repository import MongoDocumentRepository

__all__ = ["MongoConnection", "MongoDocumentRepository", "connect"]
