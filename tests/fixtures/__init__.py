"""Shared helpers for the scaffoldr test-suite."""

from .fakes import FinishedHandle, RecordingRunner, ScriptedPrompter
from .trees import read_tree, write_tree

__all__ = [
    "FinishedHandle",
    "RecordingRunner",
    "ScriptedPrompter",
    "read_tree",
    "write_tree",
]
