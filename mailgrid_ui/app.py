"""
App - GUI-facing bindings.

Every method returns a plain dict so the frontend can consume it directly:
    {"success": True, "message": "..."}
    {"success": False, "error": "..."}

This is the only layer that turns exceptions into values.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from mailgrid_ui.errors import MailgridUIError
from mailgrid_ui.result import OperationResult
from mailgrid_ui.scheduler import SchedulerHandle
from mailgrid_ui.schemas import UIRequest
from mailgrid_ui.service import MailgridService

logger = logging.getLogger(__name__)

Payload = Union[UIRequest, dict]


def _to_ui_request(payload: Payload) -> UIRequest:
    if isinstance(payload, UIRequest):
        return payload
    return UIRequest.from_dict(payload)


class App:
    """Binds GUI actions to MailgridService operations."""

    def __init__(self, service: Optional[MailgridService] = None):
        self.mailgrid = service or MailgridService()
        self.scheduler: Optional[SchedulerHandle] = None

    def call_mailgrid(self, args: Payload) -> dict[str, Any]:
        """Execute the email campaign."""
        return self._invoke(
            lambda: self.mailgrid.run(_to_ui_request(args)),
            "Campaign executed successfully",
        )

    def preview_mailgrid(self, args: Payload) -> dict[str, Any]:
        """Start the preview server."""
        return self._invoke(
            lambda: self.mailgrid.preview(_to_ui_request(args)),
            "Preview server started",
        )

    def schedule_mailgrid(self, args: Payload) -> dict[str, Any]:
        """Schedule an email campaign."""
        return self._invoke(
            lambda: self.mailgrid.schedule_job(_to_ui_request(args)),
            "Campaign scheduled successfully",
        )

    def list_scheduled_jobs(self, db_path: str = "") -> dict[str, Any]:
        """List all scheduled jobs."""
        try:
            jobs = self.mailgrid.list_jobs(db_path)
        except MailgridUIError as e:
            return OperationResult.failed(e, jobs=[]).to_dict()
        except Exception as e:
            logger.exception("Unexpected error listing jobs")
            return OperationResult.failed(e, jobs=[]).to_dict()
        return OperationResult.ok(jobs=jobs).to_dict()

    def cancel_scheduled_job(self, job_id: str, db_path: str = "") -> dict[str, Any]:
        """Cancel a scheduled job."""
        return self._invoke(
            lambda: self.mailgrid.cancel_job(job_id, db_path),
            "Job cancelled successfully",
        )

    def start_scheduler(self, db_path: str = "") -> dict[str, Any]:
        """
        Start the job scheduler daemon in the background.

        Returns as soon as the daemon is submitted. Its outcome is reported
        by scheduler_status().
        """
        if self.scheduler is not None and not self.scheduler.done():
            return OperationResult.failed("Scheduler already running").to_dict()
        self.scheduler = self.mailgrid.start_scheduler(db_path)
        return OperationResult.ok("Scheduler started").to_dict()

    def scheduler_status(self) -> dict[str, Any]:
        """Report the background scheduler's state and error, if any."""
        if self.scheduler is None:
            return {"success": True, "status": "idle"}
        status = self.scheduler.status
        if status == "failed":
            return {"success": False, "status": status, "error": str(self.scheduler.exception())}
        return {"success": True, "status": status}

    def save_smtp_config(self, config: dict[str, Any], path: str) -> None:
        """Save SMTP configuration to a JSON file."""
        Path(path).write_text(json.dumps(config, indent=2))

    def load_smtp_config(self, path: str) -> dict[str, Any]:
        """
        Load SMTP configuration from a JSON file.

        Raises:
            ValueError: If the document is not a JSON object
        """
        config = json.loads(Path(path).read_text())
        if not isinstance(config, dict):
            raise ValueError(f"SMTP config must be a JSON object: {path}")
        return config

    def save_text_file(self, path: str, content: str) -> None:
        """Write the given content to the provided path."""
        Path(path).write_text(content)

    def _invoke(self, operation, message: str) -> dict[str, Any]:
        try:
            operation()
        except MailgridUIError as e:
            return OperationResult.failed(e).to_dict()
        except Exception as e:
            # GUI boundary: every failure becomes a result dict
            logger.exception(f"Unexpected error: {e}")
            return OperationResult.failed(e).to_dict()
        return OperationResult.ok(message).to_dict()
