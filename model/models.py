# model/models.py
import copy
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

DEFAULT_STORE_NAME = "Naqshi Gold & Pearls"
ID_PREFIX = "NGP"
ITEMS_PER_PAGE = 10
EXPORT_VERSION = "1.0.0"

# Fixed vocabulary shown in the type combo. "Other" switches on the custom type field.
ITEM_TYPES = ["Ring", "Necklace", "Bracelet", "Earrings", "Chain", "Pendant",
              "Bangle", "Anklet", "Nose Pin", "Toe Ring", "Pearls", "Set"]
OTHER_TYPE = "Other"

_ID_PATTERN = re.compile(r"^%s(\d+)$" % ID_PREFIX)


# --- Errors ---

class InventoryError(Exception):
    """Base class for everything the inventory core raises."""


class ValidationError(InventoryError):
    def __init__(self, field_name, message=None):
        self.field = field_name
        super().__init__(message or f"Fill {field_name}")


class NotFoundError(InventoryError):
    def __init__(self, item_id):
        self.item_id = item_id
        super().__init__(f"Item {item_id} not found")


class PersistenceError(InventoryError):
    pass


class ImportDataError(InventoryError):
    pass


@dataclass
class OperationResult:
    """Outcome of a call that reports failure instead of raising."""
    success: bool
    error: Optional[str] = None

    def __bool__(self):
        return self.success


# --- Field table ---

def parse_number(value) -> Optional[float]:
    """Float value of a form entry, or None when blank/unparseable."""
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _positive(value):
    number = parse_number(value)
    return number is not None and number > 0


def _non_negative(value):
    number = parse_number(value)
    return number is not None and number >= 0


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    required: bool = False
    default: str = ""
    validator: Optional[Callable[[Any], bool]] = None
    error: str = ""


# Order matters: validation reports the first failing entry.
ITEM_FIELDS = (
    FieldSpec("storeName", "Store Name", required=True),
    FieldSpec("itemId", "Item ID", required=True),
    FieldSpec("itemType", "Item Type", required=True),
    FieldSpec("weight", "Weight (g)", required=True, validator=_positive,
              error="Weight must be a positive number"),
    FieldSpec("purity", "Purity", required=True),
    FieldSpec("totalPrice", "Total Price", required=True, validator=_non_negative,
              error="Total price must be zero or more"),
    FieldSpec("size", "Size"),
    FieldSpec("color", "Color"),
    FieldSpec("hallmark", "Hallmark"),
    FieldSpec("description", "Description"),
    FieldSpec("goldRate", "Gold Rate", validator=_non_negative,
              error="Gold rate must be zero or more"),
    FieldSpec("makingCharges", "Making Charges", validator=_non_negative,
              error="Making charges must be zero or more"),
    FieldSpec("stoneValue", "Stone Value", validator=_non_negative,
              error="Stone value must be zero or more"),
)

FIELDS_BY_NAME = {spec.name: spec for spec in ITEM_FIELDS}


def clean_fields(fields: Dict[str, Any]) -> Dict[str, str]:
    """
    Runs raw form values through the field table.
    Returns the trimmed values; raises ValidationError on the first bad field.
    """
    cleaned = {}
    for spec in ITEM_FIELDS:
        raw = fields.get(spec.name)
        value = spec.default if raw is None else str(raw).strip()
        if not value:
            if spec.required:
                raise ValidationError(spec.name)
            cleaned[spec.name] = ""
            continue
        if spec.validator and not spec.validator(value):
            raise ValidationError(spec.name, spec.error)
        cleaned[spec.name] = value

    if cleaned["itemType"] == OTHER_TYPE:
        custom = str(fields.get("customType") or "").strip()
        if not custom:
            raise ValidationError("customType", "Enter custom type")
        cleaned["itemType"] = custom
    return cleaned


def format_item_id(sequence: int) -> str:
    return f"{ID_PREFIX}{sequence:04d}"


def item_sequence(item_id) -> Optional[int]:
    """Numeric suffix of an NGP id, None for ids in any other shape."""
    match = _ID_PATTERN.match(str(item_id or ""))
    return int(match.group(1)) if match else None


# --- Records ---

_RECORD_KEYS = ["id"] + [spec.name for spec in ITEM_FIELDS] + ["dateCreated", "dateModified"]


@dataclass
class JewelryItem:
    id: str
    storeName: str
    itemId: str
    itemType: str
    weight: str
    purity: str
    totalPrice: str
    size: str = ""
    color: str = ""
    hallmark: str = ""
    description: str = ""
    goldRate: str = ""
    makingCharges: str = ""
    stoneValue: str = ""
    dateCreated: str = ""
    dateModified: str = ""
    # Keys from loaded/imported files we don't model; written back untouched.
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JewelryItem":
        values = {}
        for key in _RECORD_KEYS:
            value = data.get(key)
            values[key] = "" if value is None else str(value)
        if not values["id"]:
            values["id"] = values["itemId"]
        extra = {k: copy.deepcopy(v) for k, v in data.items() if k not in _RECORD_KEYS}
        return cls(extra=extra, **values)

    def to_dict(self) -> Dict[str, Any]:
        data = {key: getattr(self, key) for key in _RECORD_KEYS}
        data.update(copy.deepcopy(self.extra))
        return data

    def check(self):
        """Raises ValidationError if the record breaks the store invariants."""
        if not self.id:
            raise ValidationError("id")
        if self.id != self.itemId:
            raise ValidationError("itemId", f"Item ID {self.itemId} does not match id {self.id}")
        for spec in ITEM_FIELDS:
            value = getattr(self, spec.name).strip()
            if not value:
                if spec.required:
                    raise ValidationError(spec.name)
                continue
            if spec.validator and not spec.validator(value):
                raise ValidationError(spec.name, spec.error)


@dataclass
class StoreSettings:
    storeName: str = DEFAULT_STORE_NAME
    lastItemId: int = 0
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreSettings":
        """Merges over the defaults. Raises ValueError on an unusable counter."""
        store_name = data.get("storeName")
        last_id = data.get("lastItemId", 0)
        if isinstance(last_id, bool):
            raise ValueError("lastItemId must be an integer")
        last_id = int(last_id)
        if last_id < 0:
            raise ValueError("lastItemId must not be negative")
        extra = {k: copy.deepcopy(v) for k, v in data.items() if k not in ("storeName", "lastItemId")}
        return cls(storeName=str(store_name) if store_name else DEFAULT_STORE_NAME,
                   lastItemId=last_id, extra=extra)

    def to_dict(self) -> Dict[str, Any]:
        data = {"storeName": self.storeName, "lastItemId": self.lastItemId}
        data.update(copy.deepcopy(self.extra))
        return data
