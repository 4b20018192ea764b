from unittest.mock import MagicMock, patch

import pytest
from pymongo import ReadPreference
from pymongo.errors import ServerSelectionTimeoutError

from docmapper.core.config import get_settings, reset_settings
from docmapper.core.exceptions import DocMapperError, StoreInitializationError
from docmapper.infrastructure.db.mongo_connection import MongoConnection, connect

MONGO_CLIENT = "docmapper.infrastructure.db.mongo_connection.MongoClient"
GET_SETTINGS = "docmapper.infrastructure.db.mongo_connection.get_settings"


class TestMongoConnection:

    def test_open_pings_primary(self):
        with patch(MONGO_CLIENT) as client_cls:
            connection = MongoConnection("mongodb://db:27017", "app", connect_timeout_ms=500)
            database = connection.open()

        client = client_cls.return_value
        client_cls.assert_called_once_with(
            "mongodb://db:27017",
            serverSelectionTimeoutMS=500,
            connectTimeoutMS=500,
            tz_aware=True,
        )
        client.admin.command.assert_called_once_with("ping", read_preference=ReadPreference.PRIMARY)
        assert database is client.__getitem__.return_value
        client.__getitem__.assert_called_with("app")
        assert connection.is_open

    @pytest.mark.parametrize("timeout_ms", [0, 500])
    def test_explicit_timeout_skips_settings(self, timeout_ms):
        with patch(GET_SETTINGS) as settings, patch(MONGO_CLIENT) as client_cls:
            MongoConnection("mongodb://db:27017", "app", connect_timeout_ms=timeout_ms).open()

        settings.assert_not_called()
        assert client_cls.call_args.kwargs["serverSelectionTimeoutMS"] == timeout_ms
        assert client_cls.call_args.kwargs["connectTimeoutMS"] == timeout_ms

    def test_missing_timeout_comes_from_settings(self):
        with patch(GET_SETTINGS) as settings, patch(MONGO_CLIENT) as client_cls:
            settings.return_value.mongo_connect_timeout_ms = 2500
            MongoConnection("mongodb://db:27017", "app").open()

        settings.assert_called_once()
        assert client_cls.call_args.kwargs["serverSelectionTimeoutMS"] == 2500

    def test_open_is_idempotent(self):
        with patch(MONGO_CLIENT) as client_cls:
            connection = MongoConnection("mongodb://db:27017", "app", connect_timeout_ms=500)
            first = connection.open()
            second = connection.get_database()

        assert first is second
        client_cls.assert_called_once()

    def test_unreachable_primary_is_fatal(self):
        with patch(MONGO_CLIENT) as client_cls:
            client_cls.return_value.admin.command.side_effect = ServerSelectionTimeoutError("no primary")
            connection = MongoConnection("mongodb://db:27017", "app", connect_timeout_ms=500)
            with pytest.raises(StoreInitializationError) as exc_info:
                connection.open()

        client_cls.return_value.close.assert_called_once()
        assert isinstance(exc_info.value.__cause__, ServerSelectionTimeoutError)
        assert not connection.is_open

    @pytest.mark.parametrize("uri, name", [("", "app"), ("mongodb://db:27017", "")])
    def test_missing_configuration_is_fatal(self, uri, name):
        with patch(MONGO_CLIENT) as client_cls:
            with pytest.raises(StoreInitializationError):
                MongoConnection(uri, name, connect_timeout_ms=500).open()
        client_cls.assert_not_called()

    def test_initialization_error_is_not_a_per_call_error(self):
        assert not issubclass(StoreInitializationError, DocMapperError)

    def test_close(self):
        with patch(MONGO_CLIENT) as client_cls:
            connection = MongoConnection("mongodb://db:27017", "app", connect_timeout_ms=500)
            with connection as database:
                assert database is not None
        client_cls.return_value.close.assert_called_once()
        assert not connection.is_open

    def test_independent_instances(self):
        with patch(MONGO_CLIENT, side_effect=lambda *args, **kwargs: MagicMock()):
            first = MongoConnection("mongodb://a:27017", "one", connect_timeout_ms=500)
            second = MongoConnection("mongodb://b:27017", "two", connect_timeout_ms=500)
            assert first.open() is not second.open()
            first.close()
            assert second.is_open


class TestSettings:

    @pytest.fixture(autouse=True)
    def fresh_settings(self):
        reset_settings()
        yield
        reset_settings()

    def test_settings_from_environment(self, monkeypatch):
        monkeypatch.setenv("MONGO_URI", "mongodb://configured:27017")
        monkeypatch.setenv("DB_NAME", "configured_db")
        monkeypatch.setenv("MONGO_CONNECT_TIMEOUT_MS", "1500")

        settings = get_settings()
        assert settings.mongo_uri == "mongodb://configured:27017"
        assert settings.mongo_database_name == "configured_db"
        assert settings.mongo_connect_timeout_ms == 1500
        assert get_settings() is settings

    def test_connect_uses_settings(self, monkeypatch):
        monkeypatch.setenv("MONGO_URI", "mongodb://configured:27017")
        monkeypatch.setenv("DB_NAME", "configured_db")
        monkeypatch.setenv("MONGO_CONNECT_TIMEOUT_MS", "1500")

        with patch(MONGO_CLIENT) as client_cls:
            connection = connect()

        assert connection.is_open
        client_cls.assert_called_once_with(
            "mongodb://configured:27017",
            serverSelectionTimeoutMS=1500,
            connectTimeoutMS=1500,
            tz_aware=True,
        )
        client_cls.return_value.__getitem__.assert_called_with("configured_db")
