"""Shared helpers."""

from .formatting import format_file_size
from .logging_setup import setup_logging

__all__ = ["format_file_size", "setup_logging"]
