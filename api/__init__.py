"""HTTP service wrapping the rule engine."""

from .app import SessionManager, build_repository, create_app

__all__ = ["SessionManager", "build_repository", "create_app"]
