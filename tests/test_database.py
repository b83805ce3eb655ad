import io
import json

import pytest
from PIL import Image

from model.database import InventoryDB, default_settings
from model.models import ImportDataError


RECORD = {"id": "NGP0001", "itemId": "NGP0001", "storeName": "X", "itemType": "Ring",
          "weight": "5", "purity": "22K", "totalPrice": "300"}


def png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (30, 30), "white").save(buf, format="PNG")
    return buf.getvalue()


def test_load_without_files_gives_defaults(db):
    inventory, settings = db.load()
    assert inventory == []
    assert settings == default_settings()


def test_save_writes_pretty_json(db):
    result = db.save([RECORD], {"storeName": "X", "lastItemId": 1})
    assert result.success and result.error is None
    text = db.inventory_path.read_text(encoding="utf-8")
    assert text.startswith("[\n  {")
    assert json.loads(text) == [RECORD]
    assert json.loads(db.settings_path.read_text(encoding="utf-8")) == {"storeName": "X", "lastItemId": 1}


def test_save_then_load(db):
    db.save([RECORD], {"storeName": "X", "lastItemId": 1})
    inventory, settings = db.load()
    assert inventory == [RECORD]
    assert settings == {"storeName": "X", "lastItemId": 1}


def test_corrupt_settings_keeps_valid_inventory(db):
    db.save([RECORD], {"storeName": "X", "lastItemId": 1})
    db.settings_path.write_text("{not json", encoding="utf-8")
    inventory, settings = db.load()
    assert inventory == [RECORD]
    assert settings == default_settings()


def test_corrupt_inventory_keeps_valid_settings(db):
    db.save([RECORD], {"storeName": "X", "lastItemId": 1})
    db.inventory_path.write_text("[{]", encoding="utf-8")
    inventory, settings = db.load()
    assert inventory == []
    assert settings["lastItemId"] == 1


def test_inventory_of_wrong_shape_is_ignored(db):
    db.save([], {"storeName": "X", "lastItemId": 3})
    db.inventory_path.write_text('{"records": []}', encoding="utf-8")
    inventory, _ = db.load()
    assert inventory == []


def test_partial_settings_merge_with_defaults(db):
    db.save([], {"lastItemId": 4})
    _, settings = db.load()
    assert settings == {"storeName": default_settings()["storeName"], "lastItemId": 4}


def test_failed_settings_write_rolls_back_inventory(db, monkeypatch):
    db.save([RECORD], {"storeName": "X", "lastItemId": 1})
    original = db._write_json

    def failing(path, data):
        if path == db.settings_path:
            raise OSError("no space left")
        original(path, data)

    monkeypatch.setattr(db, "_write_json", failing)
    second = dict(RECORD, id="NGP0002", itemId="NGP0002")
    result = db.save([RECORD, second], {"storeName": "X", "lastItemId": 2})

    assert not result.success
    assert "no space left" in result.error
    inventory, settings = db.load()
    assert inventory == [RECORD]
    assert settings["lastItemId"] == 1


def test_failed_first_save_leaves_no_inventory_file(db, monkeypatch):
    original = db._write_json

    def failing(path, data):
        if path == db.settings_path:
            raise OSError("boom")
        original(path, data)

    monkeypatch.setattr(db, "_write_json", failing)
    assert not db.save([RECORD], {"lastItemId": 1})
    assert not db.inventory_path.exists()
    assert list(db.data_dir.glob("*.tmp")) == []


def test_save_image_png(db, tmp_path):
    target = tmp_path / "label.png"
    data = png_bytes()
    asked = []

    def ask(suggested):
        asked.append(suggested)
        return str(target)

    result = db.save_image(data, "NGP0001_QR.png", ask)
    assert result.success
    assert asked == ["NGP0001_QR.png"]
    assert target.read_bytes() == data


def test_save_image_pdf(db, tmp_path):
    target = tmp_path / "label.pdf"
    result = db.save_image(png_bytes(), "NGP0001_QR.png", lambda s: str(target))
    assert result.success
    assert target.read_bytes().startswith(b"%PDF")


def test_save_image_cancelled(db):
    result = db.save_image(png_bytes(), "NGP0001_QR.png", lambda s: None)
    assert not result.success
    assert result.error is None


def test_save_image_unwritable_path(db, tmp_path):
    target = tmp_path / "missing-dir" / "label.png"
    result = db.save_image(png_bytes(), "x.png", lambda s: str(target))
    assert not result.success
    assert result.error


def test_snapshot_files(db, tmp_path):
    path = tmp_path / "backup.json"
    snapshot = {"inventory": [RECORD], "settings": {"lastItemId": 1}, "version": "1.0.0"}
    assert db.write_snapshot(path, snapshot)
    assert db.read_snapshot(path) == snapshot


def test_read_snapshot_errors(db, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("nope", encoding="utf-8")
    with pytest.raises(ImportDataError):
        db.read_snapshot(bad)
    with pytest.raises(ImportDataError):
        db.read_snapshot(tmp_path / "absent.json")
