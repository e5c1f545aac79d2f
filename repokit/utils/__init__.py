"""Utility functions for RepoKit."""

from .logging import LogCapture, setup_logging

__all__ = [
    "LogCapture",
    "setup_logging",
]
