"""Route blueprints for the web application."""

from .diagnostics import diagnostics_bp
from .extraction import extraction_bp
from .jobs import jobs_bp
from .keys import keys_bp
from .normalize import normalize_bp
from .sync import sync_bp

__all__ = [
    "diagnostics_bp",
    "extraction_bp",
    "jobs_bp",
    "keys_bp",
    "normalize_bp",
    "sync_bp",
]
