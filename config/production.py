import os

from .config import Config, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

STORAGE_CONFIG = Config.storage_config()

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL

BACKUP_SCHEDULE_ENABLED = env_flag("BACKUP_SCHEDULE_ENABLED", "1")
BACKUP_INTERVAL_MINUTES = Config.BACKUP_INTERVAL_MINUTES
