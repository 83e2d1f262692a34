"""Tests for OperationResult."""

import pytest

from mailgrid_ui.errors import ConfigMissing
from mailgrid_ui.result import OperationResult


class TestOperationResult:

    def test_ok_to_dict(self):
        assert OperationResult.ok("done").to_dict() == {"success": True, "message": "done"}

    def test_ok_with_jobs(self):
        result = OperationResult.ok(jobs=[{"id": "1"}])
        assert result.to_dict() == {"success": True, "jobs": [{"id": "1"}]}

    def test_failed_uses_exception_message(self):
        result = OperationResult.failed(ConfigMissing())
        assert result.to_dict() == {"success": False, "error": "SMTP config path is required"}

    def test_failed_with_empty_jobs(self):
        result = OperationResult.failed("boom", jobs=[])
        assert result.to_dict() == {"success": False, "error": "boom", "jobs": []}

    def test_failed_exception_without_message(self):
        assert OperationResult.failed(RuntimeError()).error == "RuntimeError"

    def test_success_with_error_rejected(self):
        with pytest.raises(ValueError, match="cannot carry an error"):
            OperationResult(success=True, error="x")

    def test_failure_requires_error(self):
        with pytest.raises(ValueError, match="requires an error"):
            OperationResult(success=False)
