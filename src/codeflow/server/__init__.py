"""HTTP API for the analysis engine."""

from .app import create_app, run_server

__all__ = ["create_app", "run_server"]
