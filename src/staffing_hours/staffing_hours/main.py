from __future__ import annotations

from dotenv import load_dotenv

from config import get_settings_module, load_settings

from .common.logger import configure_logging, get_logger
from .container import Container, build_container
from .database.connection import DBConfig

logger = get_logger("main")


def create_container() -> Container:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = load_settings()
    debug = bool(getattr(settings, "DEBUG", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "DEBUG" if debug else "INFO"))

    store_backend = getattr(settings, "STORE_BACKEND", "lark")
    if debug:
        # Helpful startup info to see which store the process talks to.
        if store_backend == "mysql":
            target = DBConfig.from_dict(getattr(settings, "DB_CONFIG", {})).describe()
        else:
            target = f"lark base {getattr(settings, 'LARK_CONFIG', {}).get('base_id') or '<unset>'}"
        logger.info("settings=%s store=%s (%s)", settings_module, store_backend, target)

    return build_container(
        store_backend=store_backend,
        lark_config=getattr(settings, "LARK_CONFIG", {}),
        lark_tables=getattr(settings, "LARK_TABLES", {}),
        db_config=getattr(settings, "DB_CONFIG", {}),
        cache_ttl_seconds=float(getattr(settings, "CACHE_TTL_SECONDS", 300)),
        timezone_offset_hours=int(getattr(settings, "TIMEZONE_OFFSET_HOURS", 7)),
        fixed_shift_cutoff=getattr(settings, "FIXED_SHIFT_CUTOFF", "13:00"),
        hours_attribution=getattr(settings, "HOURS_ATTRIBUTION", "summary_table"),
        position_policies=getattr(settings, "POSITION_POLICIES", None),
    )
