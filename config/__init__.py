import importlib
import os


def get_settings_module() -> str:
    # Chọn module cấu hình theo biến APP_ENV, mặc định là 'development'
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def load_settings(module_name: str | None = None) -> dict:
    """UPPER_CASE names of the selected settings module as a plain dict."""
    settings = importlib.import_module(module_name or get_settings_module())
    return {key: getattr(settings, key) for key in dir(settings) if key.isupper()}
