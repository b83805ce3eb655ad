from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

DATA_DIR = BASE_DIR / "data"
INVENTORY_FILENAME = "naqshi-store-data.json"
SETTINGS_FILENAME = "settings.json"
