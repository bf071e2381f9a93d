"""Orchestration of a full backup run.

This package provides:
- Main orchestrator (run_backup) wiring client, sinks and progress per output mode
- RichProgressObserver for live terminal progress
"""

from tpbackup.orchestration.display import RichProgressObserver
from tpbackup.orchestration.orchestrator import BackupOutput, run_backup

__all__ = [
    "run_backup",
    "BackupOutput",
    "RichProgressObserver",
]
