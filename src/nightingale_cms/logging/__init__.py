"""
Logging package for ``nightingale_cms``.

Use ``get_logger(__name__)`` in modules to inherit shared handlers and write to a
module-specific log file.
"""

from .logger import get_logger

__all__ = ["get_logger"]
