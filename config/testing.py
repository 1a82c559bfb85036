import os

from .config import Config, env_flag

SECRET_KEY = "test-secret"

STORAGE_CONFIG = {
    **Config.storage_config(),
    "data_dir": os.getenv("DATA_DIR", "test-data"),
    "backup_dir": os.getenv("BACKUP_DIR", "test-backups"),
    "read_retry_delay_ms": float(os.getenv("READ_RETRY_DELAY_MS", "0")),
}

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

BACKUP_SCHEDULE_ENABLED = env_flag("BACKUP_SCHEDULE_ENABLED", "0")
BACKUP_INTERVAL_MINUTES = Config.BACKUP_INTERVAL_MINUTES
