import os


def env_flag(name: str, default: bool) -> bool:
    return bool(int(os.getenv(name, "1" if default else "0")))


def db_config_from_env(default_database: str) -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", ""),
        "database": os.getenv("DB_NAME", default_database),
        "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
    }


# Hard cap on waiting for the browser's position during check-in.
GEOLOCATION_TIMEOUT_SECONDS = float(os.getenv("GEOLOCATION_TIMEOUT_SECONDS", "5"))
# Days with at least this many hours count as a full day.
FULL_DAY_HOURS = float(os.getenv("FULL_DAY_HOURS", "5"))
