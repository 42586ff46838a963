"""Flask-based web interface for committee pages."""
from __future__ import annotations

from .app import create_app

__all__ = ["create_app"]
