import os

def env_bool(key, default=False):
    return os.getenv(key, str(default)).lower() in ("1", "true", "yes", "on")

DB_NAME = os.getenv("DB_NAME", "worldbank")
COUNTRIES_COLLECTION = os.getenv("COUNTRIES_COLLECTION", "countries")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None
COUNTRY_SEED_FILE = os.getenv("COUNTRY_SEED_FILE") or None
BOOTSTRAP_INDEXES = env_bool("DB_BOOTSTRAP_INDEXES")
