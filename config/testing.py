import os

from .config import DB_CONFIG

SECRET_KEY = "test-secret"

STORAGE_BACKEND = "workbook"
WORKBOOK_PATH = os.getenv("WORKBOOK_PATH", "data/test-attendance.xlsx")

DB_CONFIG = DB_CONFIG

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
CORS_ORIGINS = ["*"]

AUTO_INIT_DB = False
AUTO_SEED_DB = False
