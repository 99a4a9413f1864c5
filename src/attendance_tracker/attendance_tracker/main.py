from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from config import get_settings_module

from .api.controller import register as register_api
from .container import Container, build_container
from .core.enums import StorageBackend
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_workbook, list_tables, seed_workbook

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def _bootstrap_storage(settings, container: Container, *, backend: str) -> None:
    auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
    auto_seed_db = bool(getattr(settings, "AUTO_SEED_DB", False))
    db_config = getattr(settings, "DB_CONFIG", {})

    if backend == StorageBackend.MYSQL.value:
        if auto_init_db:
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if auto_seed_db:
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            logger.info("Demo roster seeded")
        return

    tables = container.tables
    if auto_init_db:
        ensure_workbook([tables.ledger, tables.roster, tables.locations])
    if auto_seed_db:
        seed_workbook(tables.roster)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Passing a container skips settings-driven storage wiring (used by tests).
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    CORS(app, origins=getattr(settings, "CORS_ORIGINS", ["*"]))

    if container is None:
        backend = str(getattr(settings, "STORAGE_BACKEND", StorageBackend.WORKBOOK.value)).lower()
        container = build_container(
            backend=backend,
            db_config=getattr(settings, "DB_CONFIG", None),
            workbook_path=str(REPO_ROOT / getattr(settings, "WORKBOOK_PATH", "data/attendance.xlsx")),
        )
        logger.info("settings=%s storage=%s", settings_module, backend)
        _bootstrap_storage(settings, container, backend=backend)

    register_api(app, container)
    return app
