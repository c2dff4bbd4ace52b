"""Shared testing fixtures for the quiz_runner test suite."""

from .questions import SAMPLE_CSV, csv_text  # noqa: F401
from .workspace import WorkspaceBuilder, build_tree  # noqa: F401

__all__ = [
    "SAMPLE_CSV",
    "WorkspaceBuilder",
    "build_tree",
    "csv_text",
]
