"""
mailgrid-ui - Request translation layer for the mailgrid campaign engine.

Normalizes GUI campaign requests into engine requests, materializes inline
templates and recipient data as temp files, and guarantees their cleanup.
"""

__version__ = "0.1.0"


__all__ = ["App", "MailgridService", "UIRequest", "ExecutionRequest", "normalize"]

from .schemas import ExecutionRequest, UIRequest
from .mapping import normalize
from .service import MailgridService
from .app import App
