"""
MailgridService - operation dispatcher between the GUI and the engine.

Run, Preview and Schedule normalize the UI request and call the engine
inside the artifact scope, so temp files are released on every exit path.
ListJobs, CancelJob and the scheduler daemon build minimal requests
directly; they create no artifacts.

Error handling contract:
- Validation and temp-write errors propagate unchanged
- Any other engine failure is re-raised as ExecutionEngineError with the
  engine's message verbatim
- Nothing is retried
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from mailgrid_ui.defaults import DEFAULT_SCHEDULER_DB, if_blank, is_blank
from mailgrid_ui.engine import EngineFn, get_engine
from mailgrid_ui.errors import ExecutionEngineError, InvalidRequestField, MailgridUIError
from mailgrid_ui.mapping import normalize
from mailgrid_ui.scheduler import SchedulerHandle
from mailgrid_ui.schemas import ExecutionRequest, UIRequest

logger = logging.getLogger(__name__)


class MailgridService:
    """Dispatches the five campaign operations plus the scheduler daemon."""

    def __init__(self, engine: Optional[EngineFn] = None, temp_dir: Optional[str] = None):
        self._engine = engine
        self.temp_dir = temp_dir

    @property
    def engine(self) -> EngineFn:
        return self._engine if self._engine is not None else get_engine()

    def run(self, args: UIRequest) -> None:
        """Execute the campaign."""
        self._execute_normalized("run", args, force_preview=False)

    def preview(self, args: UIRequest) -> None:
        """Start the preview server using the first recipient and the template."""
        self._execute_normalized("preview", args, force_preview=True)

    def schedule_job(self, args: UIRequest) -> None:
        """Schedule the campaign; the engine interprets the scheduling fields."""
        self._execute_normalized("schedule", args, force_preview=False)

    def list_jobs(self, db_path: str = "") -> list[dict]:
        """
        List scheduled jobs.

        Returns the engine's job records as dicts, or an empty list when the
        engine only prints them.
        """
        request = ExecutionRequest(
            list_jobs=True,
            scheduler_db=if_blank(db_path, DEFAULT_SCHEDULER_DB),
        )
        returned = self._call_engine("list_jobs", request)
        if not isinstance(returned, (list, tuple)):
            return []
        return [dict(job) if isinstance(job, Mapping) else {"job": job} for job in returned]

    def cancel_job(self, job_id: str, db_path: str = "") -> None:
        """Cancel a previously scheduled (not yet executed) job."""
        if is_blank(job_id):
            raise InvalidRequestField("job_id", "is required")
        request = ExecutionRequest(
            cancel_job_id=job_id,
            scheduler_db=if_blank(db_path, DEFAULT_SCHEDULER_DB),
        )
        self._call_engine("cancel_job", request)

    def run_scheduler(self, db_path: str = "") -> None:
        """Run the scheduler daemon in the foreground until the engine returns."""
        request = ExecutionRequest(
            scheduler_run=True,
            scheduler_db=if_blank(db_path, DEFAULT_SCHEDULER_DB),
        )
        self._call_engine("scheduler", request)

    def start_scheduler(self, db_path: str = "") -> SchedulerHandle:
        """Start the scheduler daemon in the background and return its handle."""
        db = if_blank(db_path, DEFAULT_SCHEDULER_DB)
        logger.info(f"Starting scheduler in background (db={db})")
        return SchedulerHandle.start(lambda: self.run_scheduler(db), db_path=db)

    def _execute_normalized(self, operation: str, args: UIRequest, force_preview: bool) -> None:
        request, artifacts = normalize(args, force_preview=force_preview, temp_dir=self.temp_dir)
        with artifacts:
            self._call_engine(operation, request)

    def _call_engine(self, operation: str, request: ExecutionRequest) -> Any:
        logger.info(f"Starting {operation}", extra={"operation": operation})
        try:
            returned = self.engine(request)
        except MailgridUIError:
            logger.error(f"{operation} failed", exc_info=True, extra={"operation": operation})
            raise
        except Exception as e:
            logger.error(f"{operation} failed: {e}", exc_info=True, extra={"operation": operation})
            raise ExecutionEngineError(str(e)) from e
        logger.info(f"{operation} completed", extra={"operation": operation})
        return returned
