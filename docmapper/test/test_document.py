from datetime import datetime, timezone

import pytest
from bson import ObjectId

from docmapper.core.exceptions import DocumentAlreadySetUpError, PreconditionError
from docmapper.test.documents import Address, AuditedUser, Customer, User


class TestDocumentLifecycle:

    def test_setup(self):
        user = User()
        assert user.get_id() is None
        assert not user.is_new()

        user.setup()
        assert isinstance(user.get_id(), ObjectId)
        assert user.get_created_at() is not None
        assert user.get_updated_at() == user.get_created_at()
        assert user.is_new()

    def test_setup_only_once(self):
        user = User()
        user.setup()
        with pytest.raises(DocumentAlreadySetUpError):
            user.setup()
        assert issubclass(DocumentAlreadySetUpError, PreconditionError)

    def test_can_save(self):
        user = User()
        assert not user.can_save()
        user.setup()
        assert user.can_save()

    def test_set_is_new(self):
        user = User()
        user.set_is_new(True)
        assert user.is_new()
        user.set_is_new(False)
        assert not user.is_new()

    def test_before_update_refreshes_updated_at(self):
        user = User()
        user.setup()
        created_at = user.get_created_at()
        user.before_update()
        assert user.get_updated_at() >= created_at
        assert user.get_created_at() == created_at

    def test_before_soft_delete(self):
        user = User()
        assert not user.is_deleted
        assert user.deleted_at is None

        user.before_soft_delete()
        assert user.is_deleted
        assert user.deleted_at is not None


class TestDocumentMapping:

    def test_to_document(self):
        user = User(first_name="Joseph", level=3)
        user.setup()
        doc = user.to_document()

        assert doc["_id"] == user.id
        assert doc["first_name"] == "Joseph"
        assert doc["level"] == 3
        assert doc["is_deleted"] is False
        assert "id" not in doc
        assert "deleted_at" not in doc
        assert "_is_new" not in doc

    def test_unsaved_document_has_no_id_key(self):
        assert "_id" not in User().to_document()

    def test_transient_fields_are_not_stored(self):
        user = AuditedUser(first_name="Ada")
        assert "calls" not in user.to_document()
        assert "fail_on" not in user.to_document()

    def test_load_document_keeps_missing_fields(self):
        user = User(last_name="Cobhams", level=7)
        user.set_is_new(True)
        oid = ObjectId()
        user.load_document({"_id": oid, "first_name": "Joseph", "unknown": 1})

        assert user.id == oid
        assert user.first_name == "Joseph"
        assert user.last_name == "Cobhams"
        assert user.level == 7
        assert not user.is_new()

    def test_from_document(self):
        oid = ObjectId()
        user = User.from_document({"_id": oid, "first_name": "Joseph", "is_deleted": True})
        assert isinstance(user, User)
        assert user.id == oid
        assert user.is_deleted

    def test_nested_dataclasses_are_stored_as_plain_values(self):
        customer = Customer(
            name="Ama",
            address=Address(street="1 Ring Rd", city="Accra"),
            previous=[Address(city="Kumasi"), Address(city="Tamale")],
            by_label={"work": Address(city="Tema")},
        )
        doc = customer.to_document()

        assert doc["address"] == {"street": "1 Ring Rd", "city": "Accra"}
        assert doc["previous"] == [{"street": "", "city": "Kumasi"}, {"street": "", "city": "Tamale"}]
        assert doc["by_label"] == {"work": {"street": "", "city": "Tema"}}

    def test_nested_dataclasses_are_rebuilt_on_load(self):
        raw = {
            "_id": ObjectId(),
            "name": "Ama",
            "address": {"street": "1 Ring Rd", "city": "Accra"},
            "previous": [{"street": "", "city": "Kumasi"}],
            "by_label": {"work": {"street": "", "city": "Tema"}},
        }
        customer = Customer.from_document(raw)

        assert customer.address == Address(street="1 Ring Rd", city="Accra")
        assert customer.previous == [Address(city="Kumasi")]
        assert isinstance(customer.previous[0], Address)
        assert customer.by_label == {"work": Address(city="Tema")}

    def test_missing_nested_value_loads_as_none(self):
        customer = Customer.from_document({"_id": ObjectId(), "address": None})
        assert customer.address is None
        assert customer.previous == []


class TestDocumentTimestamps:
    moment = datetime(2020, 3, 7, 14, 5, 9, tzinfo=timezone.utc)

    def test_format_date(self):
        assert User().format_date(self.moment, "%Y-%m-%d") == "2020-03-07"

    def test_format_date_short(self):
        assert User().format_date_short(self.moment) == "Mar 07, 2020"

    def test_format_date_time_short(self):
        assert User().format_date_time_short(self.moment) == "Mar 07, 2020 - 14:05"

    def test_formatted_created_at(self):
        user = User(created_at=self.moment)
        formatted = user.get_formatted_created_at()
        assert formatted.date_short == "Mar 07, 2020"
        assert formatted.date_time_short == "Mar 07, 2020 - 14:05"
        assert formatted.iso == "2020-03-07T14:05:09Z"
        assert formatted.model_dump(by_alias=True) == {
            "dateShort": "Mar 07, 2020",
            "dateTimeShort": "Mar 07, 2020 - 14:05",
            "iso": "2020-03-07T14:05:09Z",
        }

    def test_unset_timestamps_are_none(self):
        user = User()
        assert user.get_formatted_created_at() is None
        assert user.get_formatted_updated_at() is None
        assert user.get_formatted_deleted_at() is None
        assert user.get_timestamps() == {}

    def test_naive_timestamps_are_treated_as_utc(self):
        user = User(updated_at=datetime(2020, 3, 7, 14, 5, 9))
        assert user.get_formatted_updated_at().iso == "2020-03-07T14:05:09Z"

    def test_all_timestamps(self):
        user = User(created_at=self.moment, updated_at=self.moment)
        assert set(user.get_timestamps()) == {"createdAt", "updatedAt"}
        assert set(user.get_all_timestamps()) == {"createdAt", "updatedAt"}

        user.deleted_at = self.moment
        assert set(user.get_all_timestamps()) == {"createdAt", "updatedAt", "deletedAt"}
