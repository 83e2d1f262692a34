"""Tests for MailgridService dispatch.

Tests cover:
- Run/Preview/Schedule normalize and release artifacts on every exit path
- ListJobs/CancelJob build minimal requests with defaulted scheduler DB
- Engine errors surface verbatim as ExecutionEngineError
- Engine discovery fallback
"""

import os
from unittest.mock import MagicMock

import pytest

from mailgrid_ui.engine import register_engine
from mailgrid_ui.errors import (
    ConfigMissing,
    EngineNotInstalled,
    ExecutionEngineError,
    InvalidRequestField,
    RequestValidationError,
    TempWriteFailed,
)
from mailgrid_ui.schemas import ExecutionRequest, UIRequest
from mailgrid_ui.service import MailgridService


class TestRun:
    """Tests for the run operation."""

    def test_scenario_inline_template_and_csv(self, env_file, temp_dir, engine):
        """Inline template and CSV reach the engine as temp files, then vanish."""
        service = MailgridService(engine=engine, temp_dir=temp_dir)
        ui = UIRequest(env_path=env_file, template_html="<p>Hi</p>", csv_content="email\na@b.com", subject="Hello")

        service.run(ui)

        request = engine.last
        assert request.template_path and request.csv_path
        assert request.template_path != request.csv_path
        assert engine.file_contents[0] == {
            request.template_path: "<p>Hi</p>",
            request.csv_path: "email\na@b.com",
        }
        assert request.subject == "Hello"
        assert not os.path.exists(request.template_path)
        assert not os.path.exists(request.csv_path)

    def test_scenario_missing_env_path(self, temp_dir, engine):
        """Blank env_path fails with ConfigMissing without touching disk or engine."""
        service = MailgridService(engine=engine, temp_dir=temp_dir)

        with pytest.raises(ConfigMissing):
            service.run(UIRequest(env_path="", template_html="<p>Hi</p>"))

        assert engine.requests == []
        assert os.listdir(temp_dir) == []

    def test_run_does_not_force_preview(self, ui_request, engine):
        """Run passes the caller's show_preview through."""
        service = MailgridService(engine=engine)

        service.run(ui_request)
        assert engine.last.show_preview is False

        ui_request.show_preview = True
        service.run(ui_request)
        assert engine.last.show_preview is True

    def test_engine_failure_releases_artifacts(self, make_engine, env_file, temp_dir):
        """Artifacts are removed even when the engine raises."""
        engine = make_engine(raises=RuntimeError("smtp: 535 authentication failed"))
        service = MailgridService(engine=engine, temp_dir=temp_dir)

        with pytest.raises(ExecutionEngineError) as exc_info:
            service.run(UIRequest(env_path=env_file, template_html="<p>Hi</p>"))

        assert str(exc_info.value) == "smtp: 535 authentication failed"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert engine.file_contents[0]
        assert os.listdir(temp_dir) == []

    def test_mailgrid_errors_propagate_unwrapped(self, make_engine, ui_request):
        """Errors already in the taxonomy are not double-wrapped."""
        error = ExecutionEngineError("already classified")
        service = MailgridService(engine=make_engine(raises=error))

        with pytest.raises(ExecutionEngineError) as exc_info:
            service.run(ui_request)

        assert exc_info.value is error

    def test_temp_write_failure_skips_engine(self, env_file, tmp_path, engine):
        service = MailgridService(engine=engine, temp_dir=str(tmp_path / "missing"))

        with pytest.raises(TempWriteFailed):
            service.run(UIRequest(env_path=env_file, template_html="<p>Hi</p>"))

        assert engine.requests == []


class TestPreview:
    """Tests for the preview operation."""

    def test_preview_forces_show_preview(self, ui_request, engine):
        """Preview sets show_preview even when the caller did not."""
        ui_request.show_preview = False
        MailgridService(engine=engine).preview(ui_request)

        assert engine.last.show_preview is True

    def test_preview_releases_artifacts(self, env_file, temp_dir, engine):
        MailgridService(engine=engine, temp_dir=temp_dir).preview(
            UIRequest(env_path=env_file, template_html="<h1>x</h1>")
        )
        assert os.listdir(temp_dir) == []


class TestSchedule:
    """Tests for the schedule operation."""

    def test_schedule_carries_scheduling_fields(self, ui_request, engine):
        ui_request.cron = "*/5 * * * *"
        ui_request.job_retries = 5

        MailgridService(engine=engine).schedule_job(ui_request)

        request = engine.last
        assert request.cron == "*/5 * * * *"
        assert request.job_retries == 5
        assert request.job_backoff == "2s"
        assert request.scheduler_db == "mailgrid.db"
        assert request.show_preview is False


class TestListJobs:
    """Tests for the list_jobs operation."""

    def test_blank_db_path_defaults(self, engine):
        """Blank db_path becomes mailgrid.db before the engine call."""
        jobs = MailgridService(engine=engine).list_jobs("")

        assert jobs == []
        assert engine.last == ExecutionRequest(list_jobs=True, scheduler_db="mailgrid.db")

    def test_db_path_passed_through(self, engine):
        MailgridService(engine=engine).list_jobs("/data/jobs.db")
        assert engine.last.scheduler_db == "/data/jobs.db"
        assert engine.last.list_jobs is True
        assert engine.last.env_path == ""

    def test_structured_jobs_returned(self, make_engine):
        """Job records returned by the engine are passed back as dicts."""
        engine = make_engine(returns=[{"id": "job-1", "status": "pending"}])

        jobs = MailgridService(engine=engine).list_jobs()

        assert jobs == [{"id": "job-1", "status": "pending"}]

    def test_non_sequence_return_means_no_jobs(self, make_engine):
        assert MailgridService(engine=make_engine(returns=0)).list_jobs() == []

    def test_engine_error_surfaces(self, make_engine):
        engine = make_engine(raises=OSError("database is locked"))
        with pytest.raises(ExecutionEngineError, match="database is locked"):
            MailgridService(engine=engine).list_jobs()


class TestCancelJob:
    """Tests for the cancel_job operation."""

    def test_cancel_builds_minimal_request(self, engine):
        MailgridService(engine=engine).cancel_job("job-42", "  ")

        assert engine.last == ExecutionRequest(cancel_job_id="job-42", scheduler_db="mailgrid.db")

    def test_blank_job_id_rejected(self, engine):
        with pytest.raises(InvalidRequestField, match="job_id is required"):
            MailgridService(engine=engine).cancel_job("")
        assert engine.requests == []

    def test_blank_job_id_is_validation_error(self, engine):
        """Blank ids belong to the request-validation branch of the taxonomy."""
        with pytest.raises(RequestValidationError) as exc_info:
            MailgridService(engine=engine).cancel_job("   ")
        assert exc_info.value.field_name == "job_id"


class TestScheduler:
    """Tests for the scheduler daemon operations."""

    def test_run_scheduler_request(self, engine):
        MailgridService(engine=engine).run_scheduler("")
        assert engine.last.scheduler_run is True
        assert engine.last.scheduler_db == "mailgrid.db"

    def test_start_scheduler_returns_handle(self, engine):
        handle = MailgridService(engine=engine).start_scheduler("jobs.db")

        assert handle.result(timeout=5) is None
        assert handle.db_path == "jobs.db"
        assert engine.last.scheduler_run is True
        assert engine.last.scheduler_db == "jobs.db"

    def test_start_scheduler_failure_is_observable(self, make_engine):
        engine = make_engine(raises=RuntimeError("bind: address in use"))
        handle = MailgridService(engine=engine).start_scheduler()

        error = handle.exception(timeout=5)
        assert isinstance(error, ExecutionEngineError)
        assert str(error) == "bind: address in use"
        assert handle.status == "failed"


class TestEngineResolution:
    """Tests for engine lookup."""

    def test_registered_engine_used(self, ui_request):
        fn = MagicMock(return_value=None)
        register_engine(fn)

        MailgridService().run(ui_request)

        fn.assert_called_once()
        assert isinstance(fn.call_args.args[0], ExecutionRequest)

    def test_no_engine_installed(self, ui_request, monkeypatch):
        monkeypatch.setattr("mailgrid_ui.engine.discover_engines", lambda: {})

        with pytest.raises(EngineNotInstalled, match="No execution engine installed"):
            MailgridService().run(ui_request)


class TestOperationLogging:
    """Tests for the operation tag on engine-call log records."""

    def test_records_carry_operation(self, ui_request, engine, caplog):
        with caplog.at_level("INFO", logger="mailgrid_ui.service"):
            MailgridService(engine=engine).preview(ui_request)

        operations = {getattr(r, "operation", None) for r in caplog.records}
        assert operations == {"preview"}

    def test_failure_record_carries_operation(self, make_engine, caplog):
        engine = make_engine(raises=RuntimeError("database is locked"))

        with caplog.at_level("ERROR", logger="mailgrid_ui.service"):
            with pytest.raises(ExecutionEngineError):
                MailgridService(engine=engine).list_jobs()

        assert [r.operation for r in caplog.records] == ["list_jobs"]
