from config.base import FULL_DAY_HOURS, db_config_from_env

SECRET_KEY = "test-secret"
DB_CONFIG = db_config_from_env("attendance_test")

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

GEOLOCATION_TIMEOUT_SECONDS = 0.5

AUTO_INIT_DB = False
