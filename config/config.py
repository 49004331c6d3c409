import json
import os


class Config:
    """Giá trị mặc định dùng chung, đọc từ biến môi trường."""

    # Kho dữ liệu: "lark" (Lark Bitable) hoặc "mysql" (tự host)
    STORE_BACKEND = os.environ.get("STORE_BACKEND", "lark").lower()

    # Lark Bitable
    LARK_APP_ID = os.environ.get("LARK_APP_ID", "")
    LARK_APP_SECRET = os.environ.get("LARK_APP_SECRET", "")
    LARK_BASE_ID = os.environ.get("LARK_BASE_ID", "")
    LARK_BASE_URL = os.environ.get("LARK_BASE_URL", "https://open.larksuite.com/open-apis")
    LARK_TIMEOUT = float(os.environ.get("LARK_TIMEOUT", "20"))

    # Cấu hình DB (backend mysql)
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "staffing_hours")

    # Tính giờ công
    CACHE_TTL_SECONDS = int(os.environ.get("CACHE_TTL_SECONDS", "300"))
    TIMEZONE_OFFSET_HOURS = int(os.environ.get("TIMEZONE_OFFSET_HOURS", "7"))
    FIXED_SHIFT_CUTOFF = os.environ.get("FIXED_SHIFT_CUTOFF", "13:00")
    HOURS_ATTRIBUTION = os.environ.get("HOURS_ATTRIBUTION", "summary_table")


def lark_config() -> dict:
    return {
        "app_id": Config.LARK_APP_ID,
        "app_secret": Config.LARK_APP_SECRET,
        "base_id": Config.LARK_BASE_ID,
        "base_url": Config.LARK_BASE_URL,
        "page_size": 100,
        "max_pages": 200,
        "timeout": Config.LARK_TIMEOUT,
    }


def lark_tables() -> dict:
    # Tên bảng logic -> table id trên Lark
    return {
        "attendance": os.environ.get("LARK_ATTENDANCE_TABLE_ID", ""),
        "employees": os.environ.get("LARK_EMPLOYEE_TABLE_ID", ""),
        "work_history": os.environ.get("LARK_WORK_HISTORY_TABLE_ID", ""),
        "recruitment": os.environ.get("LARK_RECRUITMENT_TABLE_ID", ""),
        "hours_summary": os.environ.get("LARK_HOURS_SUMMARY_TABLE_ID", ""),
    }


def db_config() -> dict:
    return {
        "host": Config.DB_HOST,
        "port": Config.DB_PORT,
        "user": Config.DB_USER,
        "password": Config.DB_PASSWORD,
        "database": Config.DB_NAME,
    }


def position_policies() -> dict:
    """Vị trí -> quy tắc tính giờ, ghi đè bằng JSON trong POSITION_POLICIES."""
    raw = os.environ.get("POSITION_POLICIES", "")
    if not raw:
        return {
            "Nhân viên Mascot": "fixed_shift",
            "Nhân viên Thu ngân": "single_pair",
        }
    return json.loads(raw)
