from .config import db_config, lark_tables

# Tests inject an in-memory gateway; nothing here may reach a real store.
STORE_BACKEND = "mysql"
LARK_CONFIG = {"app_id": "test", "app_secret": "test", "base_id": "test"}
LARK_TABLES = lark_tables()
DB_CONFIG = {**db_config(), "database": "staffing_hours_test"}

CACHE_TTL_SECONDS = 300
TIMEZONE_OFFSET_HOURS = 7
FIXED_SHIFT_CUTOFF = "13:00"
HOURS_ATTRIBUTION = "summary_table"
POSITION_POLICIES = {
    "Nhân viên Mascot": "fixed_shift",
    "Nhân viên Thu ngân": "single_pair",
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
