from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.container import build_tables
from src.attendance_tracker.attendance_tracker.core.enums import StorageBackend
from src.attendance_tracker.attendance_tracker.database.bootstrap import apply_seed_sql, seed_workbook


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    backend = str(getattr(settings, "STORAGE_BACKEND", StorageBackend.WORKBOOK.value)).lower()

    if backend == StorageBackend.MYSQL.value:
        db_config = dict(settings.DB_CONFIG)
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        print(
            "OK: Seeded database -> "
            f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
        )
        return

    workbook_path = REPO_ROOT / settings.WORKBOOK_PATH
    tables = build_tables(backend=backend, workbook_path=str(workbook_path))
    added = seed_workbook(tables.roster)
    print(f"OK: Seeded workbook -> {workbook_path} (students added={added})")


if __name__ == "__main__":
    main()
