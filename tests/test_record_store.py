import json

import pytest

from aska.data.record_store import RecordStore, iso_timestamp
from aska.models import Customer, CustomerPatch

KEY = "aska.customers"


@pytest.fixture
def customers(storage, ids, clock):
    return RecordStore(storage, KEY, Customer, id_factory=ids, clock=clock)


def _create(store, **overrides):
    fields = {"name": "شركة النور", "phone": "777000111", "address": "تعز"}
    fields.update(overrides)
    return store.create(**fields)


def test_get_all_on_empty_storage(customers):
    assert customers.get_all() == []


def test_create_assigns_id_and_timestamp(customers):
    customer = _create(customers, tax_number="998877")

    assert customer.id == "id-1"
    assert customer.created_at == "2025-03-14T09:30:00.250Z"
    assert customer.updated_at is None
    assert customers.get(customer.id) == customer


def test_create_persists_stable_json_shape(customers, storage):
    _create(customers, tax_number="998877")

    stored = json.loads(storage.get_item(KEY))
    assert stored == [
        {
            "id": "id-1",
            "name": "شركة النور",
            "phone": "777000111",
            "address": "تعز",
            "createdAt": "2025-03-14T09:30:00.250Z",
            "taxNumber": "998877",
        }
    ]


def test_create_appends_in_order(customers):
    first = _create(customers, name="أ")
    second = _create(customers, name="ب")

    assert [c.id for c in customers.get_all()] == [first.id, second.id]


def test_create_rejects_unknown_fields(customers):
    with pytest.raises(TypeError):
        _create(customers, email="x@example.com")


def test_get_unknown_id(customers):
    _create(customers)
    assert customers.get("missing") is None


def test_update_merges_only_given_fields(customers, clock):
    customer = _create(customers, notes="عميل مهم")
    clock.advance(minutes=5)

    updated = customers.update(customer.id, CustomerPatch(phone="711222333"))

    assert updated.phone == "711222333"
    assert updated.name == customer.name
    assert updated.address == customer.address
    assert updated.notes == "عميل مهم"
    assert updated.created_at == customer.created_at
    assert updated.updated_at == "2025-03-14T09:35:00.250Z"
    assert customers.get(customer.id) == updated


def test_update_always_refreshes_timestamp(customers, clock):
    customer = _create(customers)
    clock.advance(seconds=1)
    first = customers.update(customer.id, CustomerPatch())
    clock.advance(seconds=1)
    second = customers.update(customer.id, CustomerPatch())

    assert first.updated_at == "2025-03-14T09:30:01.250Z"
    assert second.updated_at == "2025-03-14T09:30:02.250Z"


def test_update_can_clear_optional_field(customers):
    customer = _create(customers, tax_number="123")
    updated = customers.update(customer.id, CustomerPatch(tax_number=None))
    assert updated.tax_number is None


def test_update_unknown_id_does_not_write(customers, storage):
    _create(customers)
    before = storage.get_item(KEY)

    assert customers.update("missing", CustomerPatch(name="x")) is None
    assert storage.get_item(KEY) == before


def test_delete(customers):
    keep = _create(customers, name="أ")
    gone = _create(customers, name="ب")

    assert customers.delete(gone.id) is True
    assert customers.get_all() == [keep]


def test_delete_unknown_id_is_a_noop(customers, storage):
    _create(customers)
    before = storage.get_item(KEY)

    assert customers.delete("missing") is False
    assert storage.get_item(KEY) == before


@pytest.mark.parametrize("raw", ["{not json", '{"id": "x"}', "42", ""])
def test_corrupt_collection_reads_as_empty(customers, storage, raw):
    storage.set_item(KEY, raw)
    assert customers.get_all() == []


def test_malformed_entries_are_skipped(customers, storage):
    storage.set_item(
        KEY,
        json.dumps(
            [
                "junk",
                {"id": "no-name"},
                {"id": "ok", "name": "n", "phone": "p", "address": "a", "createdAt": "2025-01-01T00:00:00.000Z"},
            ]
        ),
    )
    assert [c.id for c in customers.get_all()] == ["ok"]


def test_collection_round_trip(customers, storage):
    _create(customers, tax_number="1", notes="n")
    _create(customers, name="ثاني")
    loaded = customers.get_all()

    reloaded = [Customer.from_dict(json.loads(json.dumps(c.to_dict()))) for c in loaded]
    assert reloaded == loaded


def test_iso_timestamp_converts_to_utc():
    from datetime import datetime, timedelta, timezone

    moment = datetime(2025, 1, 1, 3, 0, 0, 999999, tzinfo=timezone(timedelta(hours=3)))
    assert iso_timestamp(moment) == "2025-01-01T00:00:00.999Z"
