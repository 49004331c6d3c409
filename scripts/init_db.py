"""Create the MySQL record-store tables (only for STORE_BACKEND=mysql)."""

from __future__ import annotations

import sys
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module, load_settings

from src.staffing_hours.staffing_hours.database.bootstrap import ensure_database_exists, ensure_record_tables, list_tables
from src.staffing_hours.staffing_hours.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = load_settings()
    if getattr(settings, "STORE_BACKEND", "lark") != "mysql":
        raise SystemExit(f"{get_settings_module()}: STORE_BACKEND không phải mysql, không có gì để khởi tạo")

    db_config = dict(settings.DB_CONFIG)
    ensure_database_exists(db_config)
    created = ensure_record_tables(db_config)
    print(f"OK: {DBConfig.from_dict(db_config).describe()} -> {', '.join(created)} (tables={len(list_tables(db_config))})")


if __name__ == "__main__":
    main()
