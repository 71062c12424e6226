"""Web application package for the assessment translator."""

from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask


def create_app(config: Optional[Dict[str, Any]] = None, config_file: Optional[Path] = None) -> Flask:
    """Application factory for the web interface."""
    from .app import build_app  # Import here to avoid circular imports

    return build_app(config, config_file)


__all__ = ["create_app"]
