import copy
import json

import pytest

from model.inventory import InventoryStore
from model.models import DEFAULT_STORE_NAME


@pytest.fixture
def stocked(store, make_fields):
    store.create(make_fields("NGP0001", itemType="Ring", hallmark="BIS"))
    store.create(make_fields("NGP0002", itemType="Necklace", description="Kundan"))
    store.update_settings("Naqshi Test Branch")
    return store


def state(store):
    return [i.to_dict() for i in store.items], store.settings.to_dict()


def test_export_shape(stocked):
    snapshot = stocked.export_snapshot()
    assert set(snapshot) == {"inventory", "settings", "exportDate", "version"}
    assert snapshot["version"] == "1.0.0"
    assert snapshot["exportDate"].endswith("Z")
    assert [r["id"] for r in snapshot["inventory"]] == ["NGP0001", "NGP0002"]
    assert snapshot["settings"] == {"storeName": "Naqshi Test Branch", "lastItemId": 2}


def test_export_does_not_alias_store(stocked):
    snapshot = stocked.export_snapshot()
    snapshot["inventory"][0]["weight"] = "999"
    snapshot["settings"]["lastItemId"] = 40
    assert stocked.get("NGP0001").weight == "5"
    assert stocked.settings.lastItemId == 2


def test_round_trip_is_lossless(stocked):
    before = state(stocked)
    result = stocked.import_snapshot(stocked.export_snapshot())
    assert result.success
    assert state(stocked) == before


def test_import_replaces_inventory_wholesale(stocked, db, clock, make_fields):
    other = InventoryStore(db, clock=clock)
    snapshot = {"inventory": [dict(make_fields("NGP0050", itemType="Anklet"), id="NGP0050")]}
    assert stocked.import_snapshot(snapshot)
    assert [i.id for i in stocked.items] == ["NGP0050"]
    # settings half missing: store name kept, counter pulled up to the imported ids
    assert stocked.settings.storeName == "Naqshi Test Branch"
    assert stocked.peek_next_item_id() == "NGP0051"

    other.load()
    assert [i.id for i in other.items] == ["NGP0050"]


def test_import_settings_only(stocked):
    before_items = state(stocked)[0]
    assert stocked.import_snapshot({"settings": {"storeName": "Imported", "lastItemId": 9}})
    assert state(stocked)[0] == before_items
    assert stocked.settings.storeName == "Imported"
    assert stocked.settings.lastItemId == 9


def test_import_settings_fill_defaults(stocked):
    assert stocked.import_snapshot({"settings": {"lastItemId": 5}})
    assert stocked.settings.storeName == DEFAULT_STORE_NAME


@pytest.mark.parametrize("snapshot", [
    "not a dict",
    [1, 2, 3],
    {"inventory": "nope"},
    {"inventory": [1]},
    {"inventory": [{"id": "NGP0009", "itemId": "NGP0009"}]},
    {"inventory": [{"id": "NGP0009", "itemId": "NGP0009", "storeName": "X", "itemType": "Ring",
                    "weight": "-5", "purity": "22K", "totalPrice": "300"}]},
    {"inventory": [{"id": "NGP0009", "itemId": "NGP0009", "storeName": "X", "itemType": "Ring",
                    "weight": "5", "purity": "22K", "totalPrice": "abc"}]},
    {"settings": []},
    {"settings": {"lastItemId": "many"}},
])
def test_malformed_import_leaves_state_untouched(stocked, snapshot):
    before = state(stocked)
    events = []
    stocked.subscribe(events.append)
    result = stocked.import_snapshot(copy.deepcopy(snapshot))
    assert not result.success
    assert result.error
    assert state(stocked) == before
    assert events == []


def test_import_rejects_duplicate_ids(stocked, make_fields):
    record = dict(make_fields("NGP0004"), id="NGP0004")
    result = stocked.import_snapshot({"inventory": [record, dict(record)]})
    assert not result.success
    assert "NGP0004" in result.error


def test_export_and_import_files(stocked, db, clock, tmp_path):
    path = tmp_path / "backup.json"
    assert stocked.export_file(path)
    written = json.loads(path.read_text(encoding="utf-8"))
    assert written["version"] == "1.0.0"

    fresh = InventoryStore(db, clock=clock)
    assert fresh.import_file(path)
    assert state(fresh) == state(stocked)


def test_import_unreadable_file(stocked, tmp_path):
    bad = tmp_path / "broken.json"
    bad.write_text("{", encoding="utf-8")
    before = state(stocked)
    result = stocked.import_file(bad)
    assert not result.success
    assert state(stocked) == before
