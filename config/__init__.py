import importlib
import os
from types import ModuleType

# APP_ENV -> module cấu hình; mọi giá trị khác dùng development
_ENV_MODULES = {
    "prod": "production",
    "production": "production",
    "test": "testing",
    "testing": "testing",
}


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").strip().lower()
    return f"config.{_ENV_MODULES.get(env, 'development')}"


def load_settings() -> ModuleType:
    """Import the settings module picked by APP_ENV (call after load_dotenv)."""
    return importlib.import_module(get_settings_module())
