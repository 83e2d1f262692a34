"""
Temporary artifact set for one normalization call.

Inline template HTML and CSV content are written to unique temp files so
the engine can consume them by path. Every file registered here is removed
by release(), which is idempotent and never raises.

Usage:
    artifacts = TempArtifacts()
    with artifacts:
        path = artifacts.write("<p>Hi</p>", suffix=".html")
        ...
    # path is gone here, whatever happened inside the block
"""

import logging
import os
import tempfile
from typing import Optional

from mailgrid_ui.errors import TempWriteFailed

logger = logging.getLogger(__name__)

TEMP_PREFIX = "mailgrid-ui-"


class TempArtifacts:
    """Ordered set of temp files created during one call."""

    def __init__(self, temp_dir: Optional[str] = None, prefix: str = TEMP_PREFIX):
        self.temp_dir = temp_dir
        self.prefix = prefix
        self._paths: list[str] = []
        self._released = False

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(self._paths)

    @property
    def released(self) -> bool:
        return self._released

    def add(self, path: str) -> str:
        """Register an existing path for release."""
        self._paths.append(path)
        return path

    def write(self, content: str, suffix: str, label: str = "file") -> str:
        """
        Create a unique temp file holding content and register it.

        Content is written as UTF-8 without newline translation.

        Raises:
            TempWriteFailed: If the file cannot be created or written.
                Files registered earlier are NOT released here; the
                normalizer owns that decision.
        """
        try:
            fd, path = tempfile.mkstemp(suffix=suffix, prefix=self.prefix, dir=self.temp_dir)
        except OSError as e:
            raise TempWriteFailed(f"failed to create temp {label}: {e}") from e

        # registered before writing so a half-written file is still cleaned up
        self.add(path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except (OSError, UnicodeError) as e:
            raise TempWriteFailed(f"failed to write temp {label}: {e}") from e

        logger.debug(f"Wrote temp {label}: {path}")
        return path

    def release(self) -> None:
        """Delete every registered path, best-effort. Safe to call twice."""
        if self._released:
            return
        self._released = True
        for path in self._paths:
            try:
                os.remove(path)
            except OSError as e:
                logger.debug(f"Could not remove temp artifact {path}: {e}")

    def __enter__(self) -> "TempArtifacts":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __len__(self) -> int:
        return len(self._paths)

    def __repr__(self) -> str:
        return f"TempArtifacts(paths={len(self._paths)}, released={self._released})"
