"""Tests for ContactStore.

Covers:
- create / get round trip and timestamps
- partial-merge edits and updated_at monotonicity
- delete without cascade
- owner index lookups and search
"""
from __future__ import annotations

import pytest

from mini_crm.contacts import Contact, ContactStore
from mini_crm.docstore import FileDocumentStore, InMemoryDocumentStore
from mini_crm.errors import ContactNotFoundError, ValidationError


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class VanishingStore(InMemoryDocumentStore):
    """Hands out a record and drops it straight after, like a concurrent delete."""

    def get(self, table, record_id):
        record = super().get(table, record_id)
        if record is not None:
            self.delete(table, record_id)
        return record


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def db():
    return InMemoryDocumentStore()


@pytest.fixture
def store(db, clock):
    return ContactStore(db, clock=clock)


class TestCreate:
    def test_create_then_get_preserves_fields(self, store, clock):
        contact_id = store.create(
            "Ada",
            last_name="Lovelace",
            email="ada@example.com",
            phone="+44 20 0000",
            title="Analyst",
            company_id="co-1",
            owner_id="u-1",
            image="https://cdn.example.com/ada.png",
        )

        contact = store.get(contact_id)

        assert contact.id == contact_id
        assert contact.first_name == "Ada"
        assert contact.last_name == "Lovelace"
        assert contact.email == "ada@example.com"
        assert contact.phone == "+44 20 0000"
        assert contact.title == "Analyst"
        assert contact.company_id == "co-1"
        assert contact.owner_id == "u-1"
        assert contact.image == "https://cdn.example.com/ada.png"
        assert contact.created_at == contact.updated_at == clock.now

    def test_omitted_fields_are_none(self, store):
        contact_id = store.create("Ada", last_name="Lovelace")

        contact = store.get(contact_id)

        assert contact.first_name == "Ada"
        assert contact.last_name == "Lovelace"
        assert contact.email is None
        assert contact.phone is None
        assert contact.owner_id is None

    @pytest.mark.parametrize("first_name", ["", "   ", None])
    def test_blank_first_name_rejected(self, store, db, first_name):
        with pytest.raises(ValidationError, match="first_name"):
            store.create(first_name)
        assert db.collect("contacts") == []

    def test_unknown_field_rejected(self, store):
        with pytest.raises(ValidationError, match="nickname"):
            store.create("Ada", nickname="Countess")

    def test_system_fields_cannot_be_supplied(self, store):
        with pytest.raises(ValidationError, match="created_at"):
            store.create("Ada", created_at=0)

    def test_no_format_validation(self, store):
        contact_id = store.create("Ada", email="not-an-email", phone="call me")

        assert store.get(contact_id).email == "not-an-email"

    @pytest.mark.parametrize("field, value", [("phone", 5550100), ("email", ["a@x.com"])])
    def test_non_string_optional_rejected(self, store, db, field, value):
        with pytest.raises(ValidationError, match=f"{field} must be a string"):
            store.create("Ada", **{field: value})
        assert db.collect("contacts") == []

    def test_non_string_edit_rejected(self, store):
        contact_id = store.create("Ada", phone="555")

        with pytest.raises(ValidationError, match="phone"):
            store.edit(contact_id, {"phone": 5550100})
        assert store.search("zzz") == []

    def test_dangling_references_are_accepted(self, store):
        contact_id = store.create("Ada", company_id="no-such-company", owner_id="ghost")

        contact = store.get(contact_id)
        assert contact.company_id == "no-such-company"
        assert contact.owner_id == "ghost"


class TestEdit:
    def test_edit_updates_supplied_fields(self, store, clock):
        contact_id = store.create("Ada", last_name="Lovelace")
        created = store.get(contact_id)
        clock.advance(5)

        store.edit(contact_id, {"first_name": "Ada", "email": "ada@x.com"})

        contact = store.get(contact_id)
        assert contact.email == "ada@x.com"
        assert contact.first_name == "Ada"
        assert contact.created_at == created.created_at
        assert contact.updated_at == created.updated_at + 5

    def test_edit_keeps_omitted_fields(self, store):
        contact_id = store.create("Ada", last_name="Lovelace", phone="555")

        store.edit(contact_id, {"email": "ada@x.com"})

        contact = store.get(contact_id)
        assert contact.last_name == "Lovelace"
        assert contact.phone == "555"

    def test_edit_with_none_clears_field(self, store):
        contact_id = store.create("Ada", phone="555")

        store.edit(contact_id, {"phone": None})

        assert store.get(contact_id).phone is None

    def test_edit_returns_updated_contact(self, store):
        contact_id = store.create("Ada")

        contact = store.edit(contact_id, {"title": "Countess"})

        assert isinstance(contact, Contact)
        assert contact.title == "Countess"
        assert contact == store.get(contact_id)

    def test_updated_at_never_moves_backwards(self, store, clock):
        contact_id = store.create("Ada")
        before = store.get(contact_id).updated_at
        clock.advance(-10_000)

        store.edit(contact_id, {"title": "Countess"})

        contact = store.get(contact_id)
        assert contact.updated_at >= before
        assert contact.updated_at >= contact.created_at

    def test_edit_missing_contact_raises(self, store):
        with pytest.raises(ContactNotFoundError) as excinfo:
            store.edit("missing", {"first_name": "Ada"})
        assert excinfo.value.record_id == "missing"

    def test_edit_contact_deleted_before_patch(self, clock):
        db = VanishingStore()
        store = ContactStore(db, clock=clock)
        contact_id = store.create("Ada")

        with pytest.raises(ContactNotFoundError):
            store.edit(contact_id, {"email": "ada@x.com"})
        assert store.get(contact_id) is None

    def test_edit_blank_first_name_rejected(self, store):
        contact_id = store.create("Ada")

        with pytest.raises(ValidationError):
            store.edit(contact_id, {"first_name": ""})
        with pytest.raises(ValidationError):
            store.edit(contact_id, {"first_name": None})
        assert store.get(contact_id).first_name == "Ada"

    @pytest.mark.parametrize("field", ["id", "created_at", "updated_at"])
    def test_system_fields_not_editable(self, store, field):
        contact_id = store.create("Ada")

        with pytest.raises(ValidationError):
            store.edit(contact_id, {field: "x"})

    def test_last_writer_wins(self, store):
        contact_id = store.create("Ada")

        store.edit(contact_id, {"email": "first@x.com"})
        store.edit(contact_id, {"email": "second@x.com"})

        assert store.get(contact_id).email == "second@x.com"


class TestDeleteAndList:
    def test_delete_then_get_is_not_found(self, store):
        contact_id = store.create("Ada")

        assert store.delete(contact_id) is True
        assert store.get(contact_id) is None
        assert contact_id not in {c.id for c in store.list()}

    def test_delete_missing_is_not_an_error(self, store):
        assert store.delete("missing") is False

    def test_delete_does_not_cascade(self, store, db):
        contact_id = store.create("Ada")
        deal_id = db.insert("deals", {"title": "Engine", "stage": "lead", "contact_id": contact_id})
        activity_id = db.insert(
            "activities", {"kind": "note", "body": "hi", "author_id": "u1", "contact_id": contact_id}
        )

        store.delete(contact_id)

        assert db.get("deals", deal_id)["contact_id"] == contact_id
        assert db.get("activities", activity_id)["contact_id"] == contact_id

    def test_list_returns_every_created_contact(self, store):
        ids = {store.create(f"Contact {i}") for i in range(7)}

        assert {c.id for c in store.list()} == ids

    def test_ids_are_never_reused(self, store):
        first = store.create("Ada")
        store.delete(first)

        second = store.create("Ada")

        assert second != first


class TestQueries:
    def test_list_by_owner(self, store):
        a = store.create("Ada", owner_id="u1")
        store.create("Grace", owner_id="u2")
        c = store.create("Alan", owner_id="u1")

        owned = store.list_by_owner("u1")

        assert {x.id for x in owned} == {a, c}

    @pytest.mark.parametrize(
        "term, expected",
        [
            ("ada", {"Ada"}),
            ("LOVE", {"Ada"}),
            ("hopper@", {"Grace"}),
            ("555", {"Grace"}),
            ("a", {"Ada", "Grace", "Alan"}),
            ("zzz", set()),
        ],
    )
    def test_search(self, store, term, expected):
        store.create("Ada", last_name="Lovelace", email="ada@example.com")
        store.create("Grace", last_name="Hopper", email="hopper@navy.mil", phone="555-0100")
        store.create("Alan", last_name="Turing")

        found = {c.first_name for c in store.search(term)}

        assert found == expected

    def test_empty_search_returns_everything(self, store):
        store.create("Ada")
        store.create("Grace")

        assert len(store.search("")) == 2
        assert len(store.search("  ")) == 2


class TestScenario:
    """Create, edit and delete one contact end to end."""

    def test_ada_lifecycle_on_file_store(self, tmp_path, clock):
        store = ContactStore(FileDocumentStore(tmp_path), clock=clock)

        ada = store.create("Ada", last_name="Lovelace")
        contact = store.get(ada)
        assert (contact.first_name, contact.last_name, contact.email) == ("Ada", "Lovelace", None)

        clock.advance(1)
        store.edit(ada, {"first_name": "Ada", "email": "ada@x.com"})
        assert store.get(ada).email == "ada@x.com"

        store.delete(ada)
        assert ada not in {c.id for c in store.list()}
        assert store.get(ada) is None


def test_full_name_and_api_dict():
    contact = Contact(id="c1", first_name="Ada", last_name="Lovelace", created_at=1, updated_at=2)

    assert contact.full_name == "Ada Lovelace"
    api = contact.to_api_dict()
    assert api["firstName"] == "Ada"
    assert api["lastName"] == "Lovelace"
    assert api["createdAt"] == 1
    assert api["updatedAt"] == 2
    assert {"companyId", "ownerId", "image"} <= set(api)
