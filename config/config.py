import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.environ.get(name, default)))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "contribution-tracker-dev-secret"

    # Thư mục dữ liệu (tương đối so với thư mục làm việc của tiến trình)
    DATA_DIR = os.environ.get("DATA_DIR", "data")
    BACKUP_DIR = os.environ.get("BACKUP_DIR", "backups")

    # Sao lưu
    BACKUP_RETENTION_DAYS = float(os.environ.get("BACKUP_RETENTION_DAYS", "7"))
    BACKUP_INTERVAL_MINUTES = float(os.environ.get("BACKUP_INTERVAL_MINUTES", "60"))

    # Đọc CSV
    READ_MAX_ATTEMPTS = int(os.environ.get("READ_MAX_ATTEMPTS", "3"))
    READ_RETRY_DELAY_MS = float(os.environ.get("READ_RETRY_DELAY_MS", "50"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    @classmethod
    def storage_config(cls) -> dict:
        return {
            "data_dir": cls.DATA_DIR,
            "backup_dir": cls.BACKUP_DIR,
            "retention_days": cls.BACKUP_RETENTION_DAYS,
            "read_max_attempts": cls.READ_MAX_ATTEMPTS,
            "read_retry_delay_ms": cls.READ_RETRY_DELAY_MS,
        }
