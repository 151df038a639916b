import os

_MODULES = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    """Dotted path of the settings module for ``APP_ENV`` (default: development)."""
    return _MODULES.get(os.getenv("APP_ENV", "development").strip().lower(), "config.development")
