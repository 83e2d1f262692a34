"""
ExecutionRequest schema - the fully resolved request consumed by the engine.

Produced by the normalizer (run/preview/schedule) or built directly by the
dispatcher (list/cancel/scheduler). Every optional field carries a concrete
value; template_path and csv_path are real filesystem paths, never inline
content.
"""

from dataclasses import asdict, dataclass, field
from typing import Any

from mailgrid_ui.defaults import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_CONCURRENCY,
    DEFAULT_JOB_BACKOFF,
    DEFAULT_JOB_RETRIES,
    DEFAULT_PREVIEW_PORT,
    DEFAULT_RETRY_LIMIT,
    DEFAULT_SCHEDULER_DB,
)


@dataclass(frozen=True)
class ExecutionRequest:
    """
    Engine-facing request.

    Mode flags:
        dry_run: Render and validate without sending
        show_preview: Start the preview server instead of sending
        list_jobs: List scheduled jobs in scheduler_db
        cancel_job_id: Cancel the scheduled job with this ID
        scheduler_run: Run the scheduler daemon against scheduler_db

    Attributes:
        attachments: Unique absolute paths in first-seen order
    """
    env_path: str = ""
    csv_path: str = ""
    template_path: str = ""
    sheet_url: str = ""
    subject: str = ""
    text: str = ""
    to: str = ""
    cc: str = ""
    bcc: str = ""
    attachments: tuple[str, ...] = field(default_factory=tuple)
    filter: str = ""

    concurrency: int = DEFAULT_CONCURRENCY
    retry_limit: int = DEFAULT_RETRY_LIMIT
    batch_size: int = DEFAULT_BATCH_SIZE
    preview_port: int = DEFAULT_PREVIEW_PORT

    schedule_at: str = ""
    interval: str = ""
    cron: str = ""
    job_retries: int = DEFAULT_JOB_RETRIES
    job_backoff: str = DEFAULT_JOB_BACKOFF
    scheduler_db: str = DEFAULT_SCHEDULER_DB

    dry_run: bool = False
    show_preview: bool = False
    list_jobs: bool = False
    cancel_job_id: str = ""
    scheduler_run: bool = False

    @property
    def is_scheduled(self) -> bool:
        """True when the request asks for deferred or recurring execution."""
        return bool(self.schedule_at or self.interval or self.cron)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (attachments as a list)."""
        data = asdict(self)
        data["attachments"] = list(self.attachments)
        return data
