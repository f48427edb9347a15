"""Web application package for localizer."""

from flask import Flask

from localizer.config import initialize_app


def create_app(project_root=None) -> Flask:
    """Application factory for the HTTP API."""
    config = initialize_app(project_root)

    from .app import build_app  # Import here to avoid circular imports

    return build_app(config, project_root)


__all__ = ["create_app"]
