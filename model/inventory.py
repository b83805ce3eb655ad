# model/inventory.py
import copy
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

import numpy as np

from model.models import (EXPORT_VERSION, ITEMS_PER_PAGE, ImportDataError, JewelryItem,
                          NotFoundError, OperationResult, StoreSettings, ValidationError,
                          clean_fields, format_item_id, item_sequence, parse_number)


def utc_now():
    return datetime.now(timezone.utc)


def iso_timestamp(moment):
    """JS-style ISO string: UTC, milliseconds, trailing Z."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(text):
    """Aware datetime for an ISO string; naive values are read as UTC."""
    try:
        moment = datetime.fromisoformat(str(text).replace("Z", "+00:00"))
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


# --- Views over a record list ---

def filter_items(items, item_type="", purity="", search_term=""):
    term = (search_term or "").lower()
    result = []
    for item in items:
        if item_type and item.itemType != item_type:
            continue
        if purity and item.purity != purity:
            continue
        if term:
            haystack = (item.itemId, item.itemType, item.description, item.hallmark)
            if not any(term in (text or "").lower() for text in haystack):
                continue
        result.append(item)
    return result


def total_pages(records, page_size=ITEMS_PER_PAGE):
    return max(1, math.ceil(len(records) / page_size))


def clamp_page(records, page, page_size=ITEMS_PER_PAGE):
    return min(max(int(page), 1), total_pages(records, page_size))


def paginate(records, page, page_size=ITEMS_PER_PAGE):
    page = clamp_page(records, page, page_size)
    start = (page - 1) * page_size
    return list(records[start:start + page_size])


def calculate_price(weight, gold_rate, making_charges=0, stone_value=0):
    """weight x rate + making + stones, or None until weight and rate are both set."""
    weight = parse_number(weight) or 0.0
    gold_rate = parse_number(gold_rate) or 0.0
    if weight <= 0 or gold_rate <= 0:
        return None
    total = weight * gold_rate + (parse_number(making_charges) or 0.0) + (parse_number(stone_value) or 0.0)
    return round(total, 2)


@dataclass
class InventoryStats:
    total_items: int = 0
    total_value: float = 0.0
    total_weight: float = 0.0
    average_price: float = 0.0
    by_type: Dict[str, int] = field(default_factory=dict)
    by_purity: Dict[str, int] = field(default_factory=dict)


@dataclass
class StoreEvent:
    kind: str  # "load", "create", "update", "delete", "import", "settings"
    item_id: Optional[str] = None
    result: Optional[OperationResult] = None


class InventoryStore:
    """
    Owns the item list and settings. Every mutation writes through the
    storage gateway and then notifies subscribers.
    """
    def __init__(self, db, clock: Callable[[], datetime] = utc_now):
        self.db = db
        self.clock = clock
        self.items: List[JewelryItem] = []
        self.settings = StoreSettings()
        self.last_save: Optional[OperationResult] = None
        self._listeners = []

    # --- notifications ---

    def subscribe(self, listener):
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, kind, item_id=None, result=None):
        event = StoreEvent(kind, item_id, result)
        for listener in list(self._listeners):
            listener(event)

    # --- persistence ---

    def load(self):
        raw_items, raw_settings = self.db.load()
        items = []
        for entry in raw_items:
            if not isinstance(entry, dict):
                print(f" [STORE] Skipping malformed record: {entry!r}")
                continue
            items.append(JewelryItem.from_dict(entry))
        try:
            settings = StoreSettings.from_dict(raw_settings)
        except (TypeError, ValueError) as e:
            print(f" [STORE] Bad settings on disk ({e}), using defaults.")
            settings = StoreSettings()

        self.items = items
        self.settings = settings
        self._repair_sequence()
        print(f" [STORE] Loaded {len(self.items)} items, last id {self.settings.lastItemId}.")
        self._notify("load")

    def save(self):
        self.last_save = self.db.save([item.to_dict() for item in self.items], self.settings.to_dict())
        return self.last_save

    def _repair_sequence(self):
        # Counter must cover every id already issued.
        highest = max((item_sequence(item.id) or 0 for item in self.items), default=0)
        if highest > self.settings.lastItemId:
            self.settings.lastItemId = highest

    # --- ids ---

    def peek_next_item_id(self):
        return format_item_id(self.settings.lastItemId + 1)

    def next_item_id(self):
        self.settings.lastItemId += 1
        return format_item_id(self.settings.lastItemId)

    def _commit_sequence(self, item_id):
        if item_id == self.peek_next_item_id():
            self.next_item_id()
            return
        sequence = item_sequence(item_id)
        if sequence is not None and sequence > self.settings.lastItemId:
            self.settings.lastItemId = sequence

    # --- record lifecycle ---

    def get(self, item_id):
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def _index_of(self, item_id):
        for i, item in enumerate(self.items):
            if item.id == item_id:
                return i
        return -1

    def create(self, fields):
        values = clean_fields(fields)
        if self.get(values["itemId"]) is not None:
            raise ValidationError("itemId", f"Item {values['itemId']} already exists")

        stamp = iso_timestamp(self.clock())
        item = JewelryItem(id=values["itemId"], dateCreated=stamp, dateModified=stamp, **values)
        self.items.append(item)
        self._commit_sequence(item.id)

        result = self.save()
        print(f" [STORE] Created {item.id}")
        self._notify("create", item.id, result)
        return item

    def update(self, item_id, fields):
        index = self._index_of(item_id)
        if index < 0:
            raise NotFoundError(item_id)
        current = self.items[index]

        merged = current.to_dict()
        merged.update(fields)
        merged["itemId"] = current.id
        values = clean_fields(merged)

        now = self.clock()
        previous = parse_timestamp(current.dateModified)
        if previous is not None and previous > now:
            now = previous
        item = JewelryItem(id=current.id, dateCreated=current.dateCreated,
                           dateModified=iso_timestamp(now), extra=current.extra, **values)
        self.items[index] = item

        result = self.save()
        print(f" [STORE] Updated {item.id}")
        self._notify("update", item.id, result)
        return item

    def delete(self, item_id):
        index = self._index_of(item_id)
        if index < 0:
            print(f" [STORE] Delete ignored, {item_id} not in inventory.")
            return False
        del self.items[index]
        result = self.save()
        print(f" [STORE] Deleted {item_id}")
        self._notify("delete", item_id, result)
        return True

    def update_settings(self, store_name):
        store_name = (store_name or "").strip()
        if not store_name:
            raise ValidationError("storeName")
        self.settings.storeName = store_name
        result = self.save()
        self._notify("settings", None, result)
        return result

    # --- views ---

    def filter(self, item_type="", purity="", search_term=""):
        return filter_items(self.items, item_type, purity, search_term)

    def paginate(self, records, page, page_size=ITEMS_PER_PAGE):
        return paginate(records, page, page_size)

    def filter_options(self):
        types = sorted({item.itemType for item in self.items if item.itemType})
        purities = sorted({item.purity for item in self.items if item.purity})
        return types, purities

    def stats(self):
        stats = InventoryStats(total_items=len(self.items))
        if not self.items:
            return stats
        prices = np.array([parse_number(item.totalPrice) or 0.0 for item in self.items], dtype=float)
        weights = np.array([parse_number(item.weight) or 0.0 for item in self.items], dtype=float)
        stats.total_value = round(float(prices.sum()), 2)
        stats.total_weight = round(float(weights.sum()), 3)
        stats.average_price = round(float(prices.mean()), 2)
        for item in self.items:
            stats.by_type[item.itemType] = stats.by_type.get(item.itemType, 0) + 1
            stats.by_purity[item.purity] = stats.by_purity.get(item.purity, 0) + 1
        return stats

    # --- import / export ---

    def export_snapshot(self):
        return {
            "inventory": [item.to_dict() for item in self.items],
            "settings": self.settings.to_dict(),
            "exportDate": iso_timestamp(self.clock()),
            "version": EXPORT_VERSION,
        }

    def export_file(self, path):
        result = self.db.write_snapshot(path, self.export_snapshot())
        if result:
            print(f" [STORE] Exported {len(self.items)} items to {path}")
        return result

    def import_snapshot(self, snapshot):
        """
        Replaces whichever halves (inventory, settings) the snapshot carries.
        Bad input is reported in the result and leaves the store as it was.
        """
        try:
            items, settings = self._parse_snapshot(snapshot)
        except ImportDataError as e:
            print(f" [STORE] Import failed: {e}")
            return OperationResult(False, str(e))

        if items is not None:
            self.items = items
        if settings is not None:
            self.settings = settings
        self._repair_sequence()

        result = self.save()
        print(f" [STORE] Imported snapshot, {len(self.items)} items now.")
        self._notify("import", None, result)
        return result

    def import_file(self, path):
        try:
            snapshot = self.db.read_snapshot(path)
        except ImportDataError as e:
            print(f" [STORE] Import failed: {e}")
            return OperationResult(False, str(e))
        return self.import_snapshot(snapshot)

    def _parse_snapshot(self, snapshot):
        if not isinstance(snapshot, dict):
            raise ImportDataError("Import file must contain a JSON object")

        items = None
        raw_items = snapshot.get("inventory")
        if raw_items is not None:
            if not isinstance(raw_items, list):
                raise ImportDataError("'inventory' must be a list")
            items = []
            seen = set()
            for position, entry in enumerate(raw_items, start=1):
                if not isinstance(entry, dict):
                    raise ImportDataError(f"Record {position} is not an object")
                item = JewelryItem.from_dict(copy.deepcopy(entry))
                try:
                    item.check()
                except ValidationError as e:
                    raise ImportDataError(f"Record {position}: {e}") from e
                if item.id in seen:
                    raise ImportDataError(f"Duplicate item id {item.id}")
                seen.add(item.id)
                items.append(item)

        settings = None
        raw_settings = snapshot.get("settings")
        if raw_settings is not None:
            if not isinstance(raw_settings, dict):
                raise ImportDataError("'settings' must be an object")
            try:
                settings = StoreSettings.from_dict(raw_settings)
            except (TypeError, ValueError) as e:
                raise ImportDataError(f"Bad settings: {e}") from e

        return items, settings
