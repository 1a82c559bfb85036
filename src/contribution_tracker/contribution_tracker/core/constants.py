"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_RETENTION_DAYS = 7
DEFAULT_SWEEP_INTERVAL_MINUTES = 60

DEFAULT_READ_MAX_ATTEMPTS = 3
DEFAULT_READ_RETRY_DELAY_SECONDS = 0.05

DEFAULT_TENANT_ID = "default"
TENANT_METADATA_FILE = "tenant.json"
MAX_TENANT_ID_LENGTH = 64

BACKUP_NAME_MARKER = ".backup-"
CHECKSUM_ALGORITHM = "md5"
CHECKSUM_CHUNK_SIZE = 64 * 1024
