import copy
import json

import pytest

from core.db import PRODUCTS, USERS, RecordStore
from core.errors import RecordValidationError, StorageError


def _product(name="Admin Dashboard Pro", **extra):
    data = {
        "name": name,
        "description": "A dashboard kit",
        "price": 15,
        "category": "templates",
        "tags": ["react", "admin"],
        "highlights": ["Dark mode"],
        "format": "zip",
        "storage": "12MB",
        "image": "/products/1.webp",
        "userId": 1,
    }
    data.update(extra)
    return data


def test_ensure_layout_writes_empty_documents(store):
    products_doc = json.loads(store.path_for(PRODUCTS).read_text(encoding="utf-8"))
    users_doc = json.loads(store.path_for(USERS).read_text(encoding="utf-8"))
    assert products_doc == {"products": []}
    assert users_doc == {"users": []}


def test_create_assigns_next_id_and_is_listed_once(store):
    store.save(PRODUCTS, [{"id": 3, "name": "x"}, {"id": 7, "name": "y"}])

    created = store.create(PRODUCTS, _product())

    assert created["id"] == 8
    ids = [p["id"] for p in store.list_records(PRODUCTS)]
    assert ids.count(8) == 1


def test_create_on_empty_collection_starts_at_one(store):
    assert store.create(USERS, {"name": "Ada", "email": "ada@example.com"})["id"] == 1


def test_create_stamps_fields_and_ignores_caller_values(store):
    created = store.create(PRODUCTS, _product(id=99, createdAt="1999-01-01", slug="nope"))

    assert created["id"] == 1
    assert created["createdAt"] != "1999-01-01"
    assert created["createdAt"].endswith("Z")
    assert created["slug"] == "admin-dashboard-pro"


def test_create_user_defaults_image_to_null(store):
    user = store.create(USERS, {"name": "Ada", "email": "ada@example.com"})
    assert user["image"] is None
    assert "slug" not in user


def test_documents_are_pretty_printed_whole_files(store):
    store.create(PRODUCTS, _product())
    raw = store.path_for(PRODUCTS).read_text(encoding="utf-8")
    assert raw.startswith('{\n  "products": [')
    assert list(json.loads(raw)) == ["products"]


def test_round_trip_create_get_by_id_get_by_slug(store):
    created = store.create(PRODUCTS, _product())

    by_id = store.get_by_id(PRODUCTS, created["id"])
    by_slug = store.get_by_slug(created["slug"])

    assert by_id == created
    assert by_slug == created


def test_lookup_miss_returns_none(store):
    assert store.get_by_id(PRODUCTS, 42) is None
    assert store.get_by_slug("missing") is None


def test_blank_slug_is_a_validation_failure(store):
    with pytest.raises(RecordValidationError):
        store.get_by_slug("   ")


def test_duplicate_slugs_resolve_to_first_in_list_order(store):
    first = store.create(PRODUCTS, _product(name="Blog UI"))
    store.create(PRODUCTS, _product(name="blog ui!"))

    assert store.get_by_slug("blog-ui")["id"] == first["id"]


def test_update_preserves_identity_fields(store):
    created = store.create(PRODUCTS, _product())

    updated = store.update(
        PRODUCTS,
        created["id"],
        {"id": 500, "createdAt": "2000-01-01T00:00:00Z", "userId": 77, "price": 20},
    )

    assert updated["id"] == created["id"]
    assert updated["createdAt"] == created["createdAt"]
    assert updated["userId"] == created["userId"]
    assert updated["price"] == 20
    assert store.get_by_id(PRODUCTS, created["id"]) == updated


def test_update_does_not_add_user_id_when_absent(store):
    user = store.create(USERS, {"name": "Ada", "email": "ada@example.com"})
    updated = store.update(USERS, user["id"], {"userId": 3, "name": "Ada L."})
    assert "userId" not in updated
    assert updated["name"] == "Ada L."


def test_rename_keeps_original_slug(store):
    created = store.create(PRODUCTS, _product(name="Old Name"))

    updated = store.update(PRODUCTS, created["id"], {"name": "New Name"})

    assert updated["name"] == "New Name"
    assert updated["slug"] == "old-name"
    assert store.get_by_slug("new-name") is None


def test_update_missing_id_returns_none_without_writing(store):
    store.create(PRODUCTS, _product())
    before = store.path_for(PRODUCTS).read_text(encoding="utf-8")

    assert store.update(PRODUCTS, 404, {"name": "x"}) is None
    assert store.path_for(PRODUCTS).read_text(encoding="utf-8") == before


def test_delete_removes_record_and_is_idempotent(store):
    keep = store.create(PRODUCTS, _product(name="Keep"))
    drop = store.create(PRODUCTS, _product(name="Drop"))

    assert store.delete(PRODUCTS, drop["id"]) is True
    assert store.delete(PRODUCTS, drop["id"]) is False
    assert [p["id"] for p in store.list_records(PRODUCTS)] == [keep["id"]]


def test_missing_file_reads_as_empty(tmp_path):
    store = RecordStore(tmp_path / "nowhere")
    assert store.list_records(PRODUCTS) == []
    assert store.load(USERS) == []


def test_corrupt_file_lists_empty_but_blocks_writes(store):
    store.path_for(PRODUCTS).write_text("{not json", encoding="utf-8")

    assert store.list_records(PRODUCTS) == []
    with pytest.raises(StorageError):
        store.create(PRODUCTS, _product())
    # The corrupt document is left for an operator to inspect.
    assert store.path_for(PRODUCTS).read_text(encoding="utf-8") == "{not json"


def test_document_without_collection_key_is_a_storage_error(store):
    store.path_for(USERS).write_text('{"people": []}', encoding="utf-8")
    with pytest.raises(StorageError):
        store.load(USERS)


def test_unwritable_directory_is_a_storage_error(tmp_path):
    store = RecordStore(tmp_path / "missing-dir")
    with pytest.raises(StorageError):
        store.save(PRODUCTS, [])


def test_unknown_kind_is_rejected(store):
    with pytest.raises(RecordValidationError):
        store.list_records("orders")


def test_concurrent_updates_lose_the_earlier_write(store, monkeypatch):
    created = store.create(PRODUCTS, _product(price=10))

    # Both handlers read the document before either of them writes.
    snapshot = store.load(PRODUCTS)
    with monkeypatch.context() as m:
        m.setattr(store, "load", lambda kind: copy.deepcopy(snapshot))
        first = store.update(PRODUCTS, created["id"], {"price": 11})
        second = store.update(PRODUCTS, created["id"], {"description": "edited elsewhere"})

    assert first["price"] == 11
    assert second["price"] == 10
    final = store.get_by_id(PRODUCTS, created["id"])
    assert final["description"] == "edited elsewhere"
    assert final["price"] == 10


def test_non_integer_ids_never_match(store):
    store.replace_all(
        PRODUCTS,
        [
            {"id": True, "name": "Flag", "slug": "flag"},
            {"id": 1.5, "name": "Half", "slug": "half"},
            {"id": "3", "name": "Text", "slug": "text"},
        ],
    )

    assert store.get_by_id(PRODUCTS, 1) is None
    assert store.update(PRODUCTS, 1, {"price": 1}) is None
    assert store.delete(PRODUCTS, 1) is False
    assert store.get_by_id(PRODUCTS, 3)["name"] == "Text"
    assert store.create(PRODUCTS, _product(name="Next"))["id"] == 4
