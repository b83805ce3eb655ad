# model/database.py
import io
import json
import os
import tempfile
from pathlib import Path

from PIL import Image

from model.models import DEFAULT_STORE_NAME, ImportDataError, OperationResult
from utils.paths import DATA_DIR, INVENTORY_FILENAME, SETTINGS_FILENAME


def default_settings():
    return {"lastItemId": 0, "storeName": DEFAULT_STORE_NAME}


class InventoryDB:
    """
    File-backed storage for the inventory and settings documents.
    The only class in the app that reads or writes disk.
    """
    def __init__(self, data_dir=None):
        self.data_dir = Path(data_dir) if data_dir else DATA_DIR
        self.inventory_path = self.data_dir / INVENTORY_FILENAME
        self.settings_path = self.data_dir / SETTINGS_FILENAME

    def save(self, inventory, settings):
        """
        Writes both documents. A failure on the second file puts the first
        one back the way it was, so the pair never diverges.
        """
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            previous = self._read_bytes(self.inventory_path)
            self._write_json(self.inventory_path, inventory)
            try:
                self._write_json(self.settings_path, settings)
            except Exception:
                self._restore(self.inventory_path, previous)
                raise
        except Exception as e:
            print(f" [DB] ERROR: Could not save inventory: {e}")
            return OperationResult(False, str(e))
        print(f" [DB] SUCCESS: Saved {len(inventory)} items.")
        return OperationResult(True)

    def load(self):
        """Returns (inventory, settings). Missing or corrupt files fall back to defaults one by one."""
        inventory = []
        settings = default_settings()

        data = self._read_json(self.inventory_path)
        if isinstance(data, list):
            inventory = data
        elif data is not None:
            print(f" [DB] ERROR: {self.inventory_path.name} is not a list, ignoring it.")

        data = self._read_json(self.settings_path)
        if isinstance(data, dict):
            settings.update(data)
        elif data is not None:
            print(f" [DB] ERROR: {self.settings_path.name} is not an object, ignoring it.")

        return inventory, settings

    def save_image(self, png_bytes, suggested_filename, ask_path):
        """
        Asks the caller for a destination (ask_path returns a path or None) and writes the label.
        A .pdf destination gets the PNG wrapped in a single-page PDF.
        """
        path = ask_path(suggested_filename)
        if not path:
            return OperationResult(False)
        try:
            if str(path).lower().endswith(".pdf"):
                with Image.open(io.BytesIO(png_bytes)) as img:
                    img.convert("RGB").save(path, "PDF", resolution=100.0)
            else:
                with open(path, "wb") as f:
                    f.write(png_bytes)
        except Exception as e:
            print(f" [DB] ERROR: Could not write image {path}: {e}")
            return OperationResult(False, str(e))
        print(f" [DB] SUCCESS: Label written to {path}")
        return OperationResult(True)

    def write_snapshot(self, path, snapshot):
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(snapshot, f, indent=2, ensure_ascii=False)
        except Exception as e:
            print(f" [DB] ERROR: Export to {path} failed: {e}")
            return OperationResult(False, str(e))
        return OperationResult(True)

    def read_snapshot(self, path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise ImportDataError(f"Could not read {path}: {e}") from e

    # --- helpers ---

    def _read_json(self, path):
        """Parsed content of path, None when the file is missing or unreadable."""
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            print(f" [DB] ERROR: Ignoring corrupt file {path.name}: {e}")
            return None

    @staticmethod
    def _read_bytes(path):
        if not path.exists():
            return None
        with open(path, "rb") as f:
            return f.read()

    def _write_json(self, path, data):
        # Temp file in the same directory so the rename stays atomic.
        fd, tmp = tempfile.mkstemp(dir=self.data_dir, prefix=path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp, path)
        except Exception:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise

    @staticmethod
    def _restore(path, previous):
        if previous is None:
            if path.exists():
                path.unlink()
            return
        with open(path, "wb") as f:
            f.write(previous)
