from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.container import build_tables
from src.attendance_tracker.attendance_tracker.core.enums import StorageBackend
from src.attendance_tracker.attendance_tracker.database.bootstrap import apply_schema, ensure_workbook, list_tables


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    backend = str(getattr(settings, "STORAGE_BACKEND", StorageBackend.WORKBOOK.value)).lower()

    if backend == StorageBackend.MYSQL.value:
        db_config = dict(settings.DB_CONFIG)
        apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
        tables = list_tables(db_config)
        print(
            "OK: Applied schema.sql -> "
            f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
            f"(tables={len(tables)})"
        )
        return

    workbook_path = REPO_ROOT / settings.WORKBOOK_PATH
    tables = build_tables(backend=backend, workbook_path=str(workbook_path))
    ensure_workbook([tables.ledger, tables.roster, tables.locations])
    print(f"OK: Workbook ready -> {workbook_path}")


if __name__ == "__main__":
    main()
