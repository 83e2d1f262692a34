"""
mailgrid_ui.schemas - Request types for the translation layer.

UIRequest -> (normalize) -> ExecutionRequest -> execution engine

- UIRequest: Loosely defaulted campaign description from the GUI
- ExecutionRequest: Fully resolved, default-filled request for the engine
"""

from .ui_request import UIRequest
from .execution_request import ExecutionRequest

__all__ = [
    "UIRequest",
    "ExecutionRequest",
]
