"""
Request normalizer: UIRequest -> ExecutionRequest.

Steps, in order:
1. Validate the SMTP config reference (before anything touches disk)
2. Resolve attachments to unique absolute paths (also before disk writes)
3. Materialize inline template HTML to a temp file
4. Materialize inline CSV content to a temp file (only if no csv_path)
5. Apply the default table
6. OR the caller's show_preview with the operation's force_preview

The caller owns the returned TempArtifacts and must release it; the
dispatcher does so with a `with` block.
"""

import logging
import os
from typing import Iterable, Optional

from mailgrid_ui.artifacts import TempArtifacts
from mailgrid_ui.defaults import apply_defaults, is_blank
from mailgrid_ui.errors import ConfigMissing, ConfigNotFound, InvalidRequestField
from mailgrid_ui.schemas import ExecutionRequest, UIRequest

logger = logging.getLogger(__name__)


def validate_env_path(env_path: Optional[str]) -> None:
    """
    Check the SMTP config reference.

    Raises:
        ConfigMissing: env_path is blank
        ConfigNotFound: env_path does not exist on disk
    """
    if is_blank(env_path):
        raise ConfigMissing()
    if not os.path.exists(env_path):
        raise ConfigNotFound(env_path)


def normalize_attachments(attachments: Optional[Iterable[str]]) -> tuple[str, ...]:
    """
    Drop blanks, resolve relative paths, dedupe keeping first-seen order.

    Resolution is best-effort: if abspath fails the original string is kept.
    Dedupe is keyed on the resolved string.

    Raises:
        InvalidRequestField: An entry is not a string
    """
    if isinstance(attachments, str):
        raise InvalidRequestField("attachments", "must be a list of paths, not a string")

    seen: set[str] = set()
    result: list[str] = []
    for path in attachments or ():
        if path is None:
            continue
        if not isinstance(path, str):
            raise InvalidRequestField("attachments", f"entries must be strings, got {type(path).__name__}")
        if is_blank(path):
            continue
        resolved = path
        if not os.path.isabs(path):
            try:
                resolved = os.path.abspath(path)
            except (OSError, ValueError):
                resolved = path
        if resolved not in seen:
            seen.add(resolved)
            result.append(resolved)
    return tuple(result)


def normalize(
    ui_request: UIRequest,
    force_preview: bool = False,
    temp_dir: Optional[str] = None,
) -> tuple[ExecutionRequest, TempArtifacts]:
    """
    Translate a UIRequest into an ExecutionRequest.

    Args:
        ui_request: The GUI payload
        force_preview: Operation-level preview flag (True only for Preview)
        temp_dir: Directory for temp files (defaults to the platform temp dir)

    Returns:
        (ExecutionRequest, TempArtifacts). Call artifacts.release() (or use
        the artifacts as a context manager) once the engine call returns.

    Raises:
        ConfigMissing, ConfigNotFound, InvalidRequestField: Before any temp
            file is created
        TempWriteFailed: After releasing artifacts created in this call
    """
    validate_env_path(ui_request.env_path)
    attachments = normalize_attachments(ui_request.attachments)

    artifacts = TempArtifacts(temp_dir=temp_dir)
    # from here on every exit path other than the return releases the artifacts
    try:
        template_path = ui_request.template_path
        if not is_blank(ui_request.template_html):
            template_path = artifacts.write(ui_request.template_html, suffix=".html", label="template")

        csv_path = ui_request.csv_path
        if is_blank(csv_path) and not is_blank(ui_request.csv_content):
            csv_path = artifacts.write(ui_request.csv_content, suffix=".csv", label="CSV")

        resolved = apply_defaults({
            "preview_port": ui_request.preview_port,
            "concurrency": ui_request.concurrency,
            "retry_limit": ui_request.retry_limit,
            "batch_size": ui_request.batch_size,
            "job_retries": ui_request.job_retries,
            "job_backoff": ui_request.job_backoff,
            "scheduler_db": ui_request.scheduler_db,
        })

        request = ExecutionRequest(
            env_path=ui_request.env_path,
            csv_path=csv_path or "",
            template_path=template_path or "",
            sheet_url=ui_request.sheet_url,
            subject=ui_request.subject,
            text=ui_request.text,
            to=ui_request.to,
            cc=ui_request.cc,
            bcc=ui_request.bcc,
            attachments=attachments,
            filter=ui_request.filter,
            dry_run=ui_request.dry_run,
            show_preview=bool(force_preview or ui_request.show_preview),
            schedule_at=ui_request.schedule_at,
            interval=ui_request.interval,
            cron=ui_request.cron,
            **resolved,
        )
    except BaseException:
        artifacts.release()
        raise

    logger.debug(f"Normalized request ({len(artifacts)} temp artifacts)")
    return request, artifacts
