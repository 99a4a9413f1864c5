import os

from .config import DB_CONFIG, Config

SECRET_KEY = Config.SECRET_KEY

STORAGE_BACKEND = Config.STORAGE_BACKEND
WORKBOOK_PATH = Config.WORKBOOK_PATH

DB_CONFIG = DB_CONFIG

DEBUG = True
LOG_LEVEL = "DEBUG"
CORS_ORIGINS = Config.CORS_ORIGINS

# Creates missing tables/sheets on startup (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo roster rows on startup
AUTO_SEED_DB = Config.AUTO_SEED_DB
