import importlib
import os
from types import ModuleType

_ALIASES = {
    "prod": "production",
    "production": "production",
    "test": "testing",
    "testing": "testing",
}


def get_settings_module() -> str:
    # HR_CONSOLE_ENV wins over the generic APP_ENV; anything unknown is development.
    env = (os.getenv("HR_CONSOLE_ENV") or os.getenv("APP_ENV") or "development").lower()
    return f"config.{_ALIASES.get(env, 'development')}"


def load_settings() -> ModuleType:
    return importlib.import_module(get_settings_module())
