"""
Execution engine contract and discovery.

The engine is an external collaborator: a single synchronous callable that
takes an ExecutionRequest and either returns (optionally a sequence of job
records, for list_jobs requests) or raises.

Engines are discovered through the `mailgrid_ui.engines` entrypoint group:

    [project.entry-points."mailgrid_ui.engines"]
    mailgrid = "mailgrid_engine.adapter:execute"

register_engine() overrides discovery, which is how tests and embedding
applications inject an engine.
"""

import logging
from importlib.metadata import entry_points
from typing import Any, Callable, Optional

from mailgrid_ui.errors import EngineNotInstalled
from mailgrid_ui.schemas import ExecutionRequest

logger = logging.getLogger(__name__)

ENTRYPOINT_GROUP = "mailgrid_ui.engines"

# Type alias for engine functions
EngineFn = Callable[[ExecutionRequest], Any]


def discover_engines() -> dict[str, EngineFn]:
    """
    Discover all engines from the mailgrid_ui.engines entrypoints.

    Returns:
        {"mailgrid": <func>, ...}
    """
    engines: dict[str, EngineFn] = {}
    for ep in entry_points().select(group=ENTRYPOINT_GROUP):
        try:
            fn = ep.load()
        except ImportError as e:
            logger.warning(f"Skipping engine {ep.name}: {e}")
            continue
        if callable(fn):
            engines[ep.name] = fn
    return engines


def _stub_engine(request: ExecutionRequest) -> Any:
    """Engine used when none is installed."""
    raise EngineNotInstalled(
        "No execution engine installed. Install a package exposing a "
        f"'{ENTRYPOINT_GROUP}' entrypoint or call register_engine()."
    )


# Lazy-initialized engine
_ENGINE: Optional[EngineFn] = None


def get_engine(name: Optional[str] = None) -> EngineFn:
    """
    Get the active engine, discovering it on first use.

    Args:
        name: Pick a specific entrypoint by name instead of the first one found

    Raises:
        ValueError: If name is given and no such engine is installed
    """
    global _ENGINE
    if name is not None:
        engines = discover_engines()
        if name not in engines:
            raise ValueError(f"Unknown engine: {name}")
        return engines[name]

    if _ENGINE is None:
        engines = discover_engines()
        if engines:
            first = sorted(engines)[0]
            logger.debug(f"Using execution engine: {first}")
            _ENGINE = engines[first]
        else:
            _ENGINE = _stub_engine
    return _ENGINE


def register_engine(fn: Optional[EngineFn]) -> None:
    """
    Register the engine function, replacing discovery.

    Passing None resets to discovery on next use.
    """
    global _ENGINE
    _ENGINE = fn
