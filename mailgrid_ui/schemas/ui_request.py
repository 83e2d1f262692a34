"""
UIRequest schema - the campaign description submitted by the GUI.

A UIRequest is loosely defaulted: every optional field may be left unset
(None, 0 or blank) and is resolved later by the normalizer. The GUI sends
camelCase JSON keys; from_dict maps them onto the snake_case fields.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Optional


def _alias(name: str) -> dict:
    return {"json": name}


@dataclass
class UIRequest:
    """
    UI payload describing one campaign action.

    Content fields:
        env_path: SMTP config file path (required)
        csv_path / csv_content: Recipient source; csv_path wins when both set
        sheet_url: Alternate recipient source, passed through untouched
        template_path / template_html: Template source; inline HTML wins
        subject, text, to, cc, bcc: Message fields, passed through
        attachments: Attachment paths, may be relative or duplicated

    Execution-shape fields (None or 0 means default):
        concurrency, retry_limit, batch_size, preview_port, filter,
        dry_run, show_preview

    Scheduling fields:
        schedule_at, interval, cron, job_retries, job_backoff, scheduler_db
    """
    env_path: str = field(default="", metadata=_alias("envPath"))
    csv_path: str = field(default="", metadata=_alias("csvPath"))
    csv_content: str = field(default="", metadata=_alias("csvContent"))
    sheet_url: str = field(default="", metadata=_alias("sheetUrl"))
    template_path: str = field(default="", metadata=_alias("templatePath"))
    template_html: str = field(default="", metadata=_alias("templateHTML"))
    subject: str = field(default="", metadata=_alias("subject"))
    text: str = field(default="", metadata=_alias("text"))
    to: str = field(default="", metadata=_alias("to"))
    cc: str = field(default="", metadata=_alias("cc"))
    bcc: str = field(default="", metadata=_alias("bcc"))
    attachments: list[str] = field(default_factory=list, metadata=_alias("attachments"))

    concurrency: Optional[int] = field(default=None, metadata=_alias("concurrency"))
    retry_limit: Optional[int] = field(default=None, metadata=_alias("retryLimit"))
    batch_size: Optional[int] = field(default=None, metadata=_alias("batchSize"))
    preview_port: Optional[int] = field(default=None, metadata=_alias("previewPort"))
    filter: str = field(default="", metadata=_alias("filter"))
    dry_run: bool = field(default=False, metadata=_alias("dryRun"))
    show_preview: bool = field(default=False, metadata=_alias("showPreview"))

    schedule_at: str = field(default="", metadata=_alias("scheduleAt"))
    interval: str = field(default="", metadata=_alias("interval"))
    cron: str = field(default="", metadata=_alias("cron"))
    job_retries: Optional[int] = field(default=None, metadata=_alias("jobRetries"))
    job_backoff: str = field(default="", metadata=_alias("jobBackoff"))
    scheduler_db: str = field(default="", metadata=_alias("schedulerDB"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UIRequest":
        """
        Build a UIRequest from a GUI payload.

        Accepts camelCase keys (as sent by the frontend) or the snake_case
        field names. Unknown keys are ignored; null values keep the default.
        """
        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            for key in (f.metadata["json"], f.name):
                if key in data and data[key] is not None:
                    kwargs[f.name] = data[key]
                    break
        if "attachments" in kwargs:
            attachments = kwargs["attachments"]
            # a single path sent as a bare string
            if isinstance(attachments, str):
                attachments = [attachments]
            kwargs["attachments"] = list(attachments)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a camelCase dict matching the GUI payload."""
        return {f.metadata["json"]: getattr(self, f.name) for f in fields(self)}
