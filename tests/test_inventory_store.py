import json
from datetime import datetime, timezone

import pytest

from model.inventory import InventoryStore, calculate_price
from model.models import NotFoundError, ValidationError


def test_create_then_update_scenario(store, make_fields):
    item = store.create(make_fields())
    assert [i.id for i in store.items] == ["NGP0001"]
    assert item.id == item.itemId == "NGP0001"
    assert item.dateCreated == item.dateModified

    updated = store.update("NGP0001", {"weight": "6"})
    assert updated.id == "NGP0001"
    assert updated.weight == "6"
    assert updated.dateCreated == item.dateCreated
    assert updated.dateModified > item.dateModified
    assert store.get("NGP0001") is updated


def test_create_persists_both_documents(store, db, make_fields):
    store.create(make_fields())
    inventory = json.loads(db.inventory_path.read_text(encoding="utf-8"))
    settings = json.loads(db.settings_path.read_text(encoding="utf-8"))
    assert [r["id"] for r in inventory] == ["NGP0001"]
    assert settings["lastItemId"] == 1


def test_create_rejects_missing_field_without_state_change(store, make_fields):
    with pytest.raises(ValidationError) as exc:
        store.create(make_fields(purity="  "))
    assert exc.value.field == "purity"
    assert store.items == []
    assert store.settings.lastItemId == 0


def test_create_rejects_duplicate_id(store, make_fields):
    store.create(make_fields())
    with pytest.raises(ValidationError):
        store.create(make_fields())
    assert len(store.items) == 1


def test_created_ids_are_unique(store, make_fields):
    for _ in range(5):
        store.create(make_fields(item_id=store.peek_next_item_id()))
    ids = [i.id for i in store.items]
    assert ids == ["NGP0001", "NGP0002", "NGP0003", "NGP0004", "NGP0005"]
    assert store.settings.lastItemId == 5


def test_next_item_id_consumes_counter(store):
    first = store.next_item_id()
    second = store.next_item_id()
    assert (first, second) == ("NGP0001", "NGP0002")


def test_peek_does_not_consume(store):
    assert store.peek_next_item_id() == "NGP0001"
    assert store.peek_next_item_id() == "NGP0001"
    assert store.settings.lastItemId == 0


def test_higher_manual_id_advances_counter(store, make_fields):
    store.create(make_fields(item_id="NGP0010"))
    assert store.peek_next_item_id() == "NGP0011"


def test_update_missing_item(store):
    with pytest.raises(NotFoundError):
        store.update("NGP9999", {"weight": "1"})


def test_update_cannot_change_id(store, make_fields):
    store.create(make_fields())
    updated = store.update("NGP0001", {"itemId": "NGP0500", "id": "NGP0500"})
    assert updated.id == updated.itemId == "NGP0001"


def test_update_validates(store, make_fields):
    store.create(make_fields())
    with pytest.raises(ValidationError):
        store.update("NGP0001", {"weight": ""})
    assert store.get("NGP0001").weight == "5"


def test_update_never_moves_modified_backwards(db, make_fields):
    times = iter([datetime(2024, 5, 1, tzinfo=timezone.utc), datetime(2024, 4, 1, tzinfo=timezone.utc)])
    s = InventoryStore(db, clock=lambda: next(times))
    first = s.create(make_fields())
    second = s.update("NGP0001", {"weight": "7"})
    assert second.dateModified == first.dateModified


def test_update_after_import_with_naive_timestamps(store, make_fields):
    record = dict(make_fields(), id="NGP0001",
                  dateCreated="2024-03-01T09:00:00", dateModified="2024-03-01T09:30:00")
    assert store.import_snapshot({"inventory": [record]})

    updated = store.update("NGP0001", {"weight": "6"})
    assert updated.weight == "6"
    assert updated.dateCreated == "2024-03-01T09:00:00"
    assert updated.dateModified.endswith("Z")


def test_delete(store, make_fields):
    store.create(make_fields())
    assert store.delete("NGP0001") is True
    assert store.items == []
    assert store.delete("NGP0001") is False


def test_listeners_receive_events(store, make_fields):
    events = []
    store.subscribe(events.append)
    store.create(make_fields())
    store.update("NGP0001", {"color": "Yellow"})
    store.delete("NGP0001")
    store.unsubscribe(events.append)
    store.create(make_fields(item_id="NGP0002"))
    assert [(e.kind, e.item_id) for e in events] == [
        ("create", "NGP0001"), ("update", "NGP0001"), ("delete", "NGP0001")]
    assert all(e.result.success for e in events)


def test_reload_restores_state(store, db, clock, make_fields):
    store.create(make_fields(description="Engagement ring"))
    store.next_item_id()  # previewed but never used, not persisted

    fresh = InventoryStore(db, clock=clock)
    fresh.load()
    assert [i.to_dict() for i in fresh.items] == [i.to_dict() for i in store.items]
    assert fresh.settings.lastItemId == 1


def test_load_repairs_counter_behind_inventory(db, clock, make_fields):
    db.save([dict(make_fields(item_id="NGP0007"), id="NGP0007")], {"lastItemId": 2, "storeName": "X"})
    s = InventoryStore(db, clock=clock)
    s.load()
    assert s.peek_next_item_id() == "NGP0008"


def test_failed_save_keeps_memory_state(store, db, make_fields, monkeypatch):
    def broken(*args):
        raise OSError("disk full")
    monkeypatch.setattr(db, "_write_json", broken)

    item = store.create(make_fields())
    assert store.get(item.id) is item
    assert not store.last_save
    assert "disk full" in store.last_save.error


def test_update_settings(store):
    store.update_settings("  Naqshi Jewellers ")
    assert store.settings.storeName == "Naqshi Jewellers"
    with pytest.raises(ValidationError):
        store.update_settings("")


def test_stats(store, make_fields):
    store.create(make_fields("NGP0001", itemType="Ring", purity="22K", totalPrice="100", weight="2"))
    store.create(make_fields("NGP0002", itemType="Ring", purity="18K", totalPrice="250.50", weight="3.5"))
    store.create(make_fields("NGP0003", itemType="Chain", purity="22K", totalPrice="49.5", weight="10"))
    stats = store.stats()
    assert stats.total_items == 3
    assert stats.total_value == 400.0
    assert stats.total_weight == 15.5
    assert stats.average_price == pytest.approx(133.33)
    assert stats.by_type == {"Ring": 2, "Chain": 1}
    assert stats.by_purity == {"22K": 2, "18K": 1}


def test_stats_empty(store):
    stats = store.stats()
    assert stats.total_items == 0
    assert stats.total_value == 0.0


def test_calculate_price():
    assert calculate_price("5", "60", "20", "12.5") == 332.5
    assert calculate_price("2.5", "100.1") == 250.25
    assert calculate_price("5", "60", "", None) == 300.0
    assert calculate_price("", "60") is None
    assert calculate_price("5", "0") is None
