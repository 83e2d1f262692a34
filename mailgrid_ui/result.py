"""
OperationResult - uniform return shape for GUI-facing operations.

Schema:
{
  "success": true,
  "message": "...",   // optional
  "error": "...",     // optional, only on failure
  "jobs": [ { } ]     // list_scheduled_jobs only
}

Rule: error is set if and only if success is False.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class OperationResult:
    """
    Result of one GUI operation.

    Attributes:
        success: Whether the operation completed
        message: Human-readable message on success
        error: Error description on failure
        jobs: Job records (only populated for job listing)
    """
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    jobs: Optional[list[dict]] = None

    def __post_init__(self):
        if self.success and self.error is not None:
            raise ValueError("OperationResult with success=True cannot carry an error")
        if not self.success and not self.error:
            raise ValueError("OperationResult with success=False requires an error")

    @classmethod
    def ok(cls, message: Optional[str] = None, jobs: Optional[list[dict]] = None) -> "OperationResult":
        return cls(success=True, message=message, jobs=jobs)

    @classmethod
    def failed(cls, error: BaseException | str, jobs: Optional[list[dict]] = None) -> "OperationResult":
        return cls(success=False, error=str(error) or type(error).__name__, jobs=jobs)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the dict shape the GUI expects, omitting unset keys."""
        result: dict[str, Any] = {"success": self.success}
        if self.message is not None:
            result["message"] = self.message
        if self.error is not None:
            result["error"] = self.error
        if self.jobs is not None:
            result["jobs"] = self.jobs
        return result
