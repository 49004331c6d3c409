import os

from .config import Config, db_config, lark_config, lark_tables, position_policies

STORE_BACKEND = Config.STORE_BACKEND
LARK_CONFIG = lark_config()
LARK_TABLES = lark_tables()
DB_CONFIG = db_config()

CACHE_TTL_SECONDS = Config.CACHE_TTL_SECONDS
TIMEZONE_OFFSET_HOURS = Config.TIMEZONE_OFFSET_HOURS
FIXED_SHIFT_CUTOFF = Config.FIXED_SHIFT_CUTOFF
HOURS_ATTRIBUTION = Config.HOURS_ATTRIBUTION
POSITION_POLICIES = position_policies()

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
