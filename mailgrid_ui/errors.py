"""
Error classes for mailgrid-ui.

These error types classify failures at the boundary between the GUI and
the execution engine:
- RequestValidationError: The UI request is unusable (ConfigMissing, ConfigNotFound)
- TempWriteFailed: An inline template/CSV could not be materialized on disk
- ExecutionEngineError: The engine itself failed; message passed through verbatim

Error handling contract:
- Errors are exceptions, not values
- Validation errors are raised before any temporary file exists
- The App facade is the only place that turns exceptions into result dicts
"""


class MailgridUIError(Exception):
    """Base exception for mailgrid-ui."""
    pass


class ConfigError(MailgridUIError):
    """Application configuration could not be loaded."""
    pass


class RequestValidationError(MailgridUIError):
    """
    The UI request failed validation.

    Raised by the normalizer before any temporary artifact is created,
    so no cleanup is required when it propagates.
    """
    pass


class ConfigMissing(RequestValidationError):
    """The SMTP config path is absent from the request."""

    def __init__(self, message: str = "SMTP config path is required"):
        super().__init__(message)


class ConfigNotFound(RequestValidationError):
    """The SMTP config path does not resolve on disk."""

    def __init__(self, env_path: str):
        self.env_path = env_path
        super().__init__(f"SMTP config not found: {env_path}")


class InvalidRequestField(RequestValidationError):
    """A request field has an unusable value (wrong type, required but blank)."""

    def __init__(self, field_name: str, reason: str):
        self.field_name = field_name
        super().__init__(f"{field_name} {reason}")


class TempWriteFailed(MailgridUIError):
    """
    Creating or writing a temporary artifact failed.

    Examples:
    - Disk full
    - Temp directory not writable
    - Temp directory does not exist
    - Content that cannot be encoded as UTF-8 (lone surrogates)

    Artifacts created earlier in the same call are released before
    this error propagates.
    """
    pass


class ExecutionEngineError(MailgridUIError):
    """
    The execution engine reported a failure.

    The message is the engine's own message, unparsed. The original
    exception (if any) is available as __cause__.
    """
    pass


class EngineNotInstalled(ExecutionEngineError):
    """No execution engine is registered or installed."""
    pass
