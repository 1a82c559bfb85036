import os

from .config import Config, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

STORAGE_CONFIG = Config.storage_config()

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Sweep once at startup, then every BACKUP_INTERVAL_MINUTES
BACKUP_SCHEDULE_ENABLED = env_flag("BACKUP_SCHEDULE_ENABLED", "1")
BACKUP_INTERVAL_MINUTES = Config.BACKUP_INTERVAL_MINUTES
