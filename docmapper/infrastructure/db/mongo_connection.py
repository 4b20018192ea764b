"""
MongoDB Connection
==================

Explicitly constructed MongoDB connection handle.

Each MongoConnection owns its own client, so independent instances can
coexist (e.g. in tests). Opening verifies that the primary is reachable
under a short timeout; failure raises StoreInitializationError, which is
meant to stop startup rather than be handled per call.
"""
import logging
from typing import Optional

from pymongo import MongoClient, ReadPreference
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from docmapper.core.config import get_settings
from docmapper.core.exceptions import StoreInitializationError

logger = logging.getLogger(__name__)


class MongoConnection:
    """
    MongoDB connection handle.

    Manages one client and provides access to its database and collections.
    """

    def __init__(
        self,
        mongo_uri: str,
        database_name: str,
        connect_timeout_ms: Optional[int] = None,
    ) -> None:
        self._mongo_uri = mongo_uri
        self._database_name = database_name
        if connect_timeout_ms is None:
            connect_timeout_ms = get_settings().mongo_connect_timeout_ms
        self._connect_timeout_ms = connect_timeout_ms
        self._client: Optional[MongoClient] = None
        self._database: Optional[Database] = None

    @classmethod
    def from_settings(cls) -> "MongoConnection":
        """Build a connection from MONGO_URI / DB_NAME / MONGO_CONNECT_TIMEOUT_MS."""
        settings = get_settings()
        return cls(
            settings.mongo_uri,
            settings.mongo_database_name,
            settings.mongo_connect_timeout_ms,
        )

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def open(self) -> Database:
        """
        Connect, ping the primary and return the database handle.

        Raises:
            StoreInitializationError: if the URI is missing or the primary
                cannot be reached within the connect timeout
        """
        if self._database is not None:
            return self._database

        if not self._mongo_uri:
            logger.critical("MongoDB URI not provided")
            raise StoreInitializationError("❌ MONGO_URI not set. Please configure it in your .env file.")
        if not self._database_name:
            logger.critical("MongoDB database name not provided")
            raise StoreInitializationError("❌ DB_NAME not set. Please configure it in your .env file.")

        client: Optional[MongoClient] = None
        try:
            client = MongoClient(
                self._mongo_uri,
                serverSelectionTimeoutMS=self._connect_timeout_ms,
                connectTimeoutMS=self._connect_timeout_ms,
                tz_aware=True,
            )
            client.admin.command("ping", read_preference=ReadPreference.PRIMARY)
        except PyMongoError as e:
            if client is not None:
                client.close()
            logger.critical(f"Could not connect to primary at {self._mongo_uri}: {e}")
            raise StoreInitializationError(f"Could not connect to server - {self._mongo_uri}") from e

        self._client = client
        self._database = client[self._database_name]
        logger.info(f"✅ Connected to MongoDB: {self._database_name}")
        return self._database

    def get_database(self) -> Database:
        """Get the database, opening the connection on first use."""
        if self._database is None:
            return self.open()
        return self._database

    def get_collection(self, collection_name: str) -> Collection:
        """
        Get a MongoDB collection.

        Args:
            collection_name: Name of the collection

        Returns:
            MongoDB Collection object
        """
        database = self.get_database()
        return database[collection_name]

    def close(self) -> None:
        """Close MongoDB connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._database = None
            logger.info(f"Closed MongoDB connection: {self._database_name}")

    def __enter__(self) -> Database:
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


def connect(
    mongo_uri: Optional[str] = None,
    database_name: Optional[str] = None,
    connect_timeout_ms: Optional[int] = None,
) -> MongoConnection:
    """
    Open a connection, falling back to settings for anything not given.

    Raises:
        StoreInitializationError: see MongoConnection.open()
    """
    settings = get_settings()
    connection = MongoConnection(
        mongo_uri if mongo_uri is not None else settings.mongo_uri,
        database_name if database_name is not None else settings.mongo_database_name,
        connect_timeout_ms,
    )
    connection.open()
    return connection
