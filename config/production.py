import os

from .config import DB_CONFIG, Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

STORAGE_BACKEND = Config.STORAGE_BACKEND
WORKBOOK_PATH = Config.WORKBOOK_PATH

DB_CONFIG = DB_CONFIG

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL
CORS_ORIGINS = Config.CORS_ORIGINS

AUTO_INIT_DB = Config.AUTO_INIT_DB
AUTO_SEED_DB = Config.AUTO_SEED_DB
