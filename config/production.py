import os

from config.base import FULL_DAY_HOURS, GEOLOCATION_TIMEOUT_SECONDS, db_config_from_env, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DB_CONFIG = db_config_from_env("attendance_db")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", False)
