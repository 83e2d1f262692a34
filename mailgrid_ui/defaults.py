"""
Default values for optional execution-request fields.

Numeric fields treat None and 0 as "not set". The GUI sends 0 for inputs
the user never touched, so zero stays a valid sentinel alongside None.
String fields treat None, "" and whitespace-only values as "not set".
"""

from typing import Optional

DEFAULT_PREVIEW_PORT = 8080
DEFAULT_CONCURRENCY = 1
DEFAULT_RETRY_LIMIT = 1
DEFAULT_BATCH_SIZE = 1
DEFAULT_JOB_RETRIES = 3
DEFAULT_JOB_BACKOFF = "2s"
DEFAULT_SCHEDULER_DB = "mailgrid.db"

# field name -> default, applied by the normalizer
NUMERIC_DEFAULTS = {
    "preview_port": DEFAULT_PREVIEW_PORT,
    "concurrency": DEFAULT_CONCURRENCY,
    "retry_limit": DEFAULT_RETRY_LIMIT,
    "batch_size": DEFAULT_BATCH_SIZE,
    "job_retries": DEFAULT_JOB_RETRIES,
}

STRING_DEFAULTS = {
    "job_backoff": DEFAULT_JOB_BACKOFF,
    "scheduler_db": DEFAULT_SCHEDULER_DB,
}


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty and whitespace-only strings."""
    return value is None or not value.strip()


def if_unset(value: Optional[int], default: int) -> int:
    """Return default when value is None or 0."""
    if value is None or value == 0:
        return default
    return value


def if_blank(value: Optional[str], default: str) -> str:
    """Return default when value is blank."""
    if is_blank(value):
        return default
    return value


def apply_defaults(values: dict) -> dict:
    """Return a copy of values with every default-table field resolved."""
    resolved = dict(values)
    for name, default in NUMERIC_DEFAULTS.items():
        resolved[name] = if_unset(values.get(name), default)
    for name, default in STRING_DEFAULTS.items():
        resolved[name] = if_blank(values.get(name), default)
    return resolved
