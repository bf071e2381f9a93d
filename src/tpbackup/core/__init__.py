"""Core data models, configuration, interfaces and the backup use case.

This package provides:
- Data models (ResourcePage, WorkerProgress, BackupStats)
- Configuration classes (ClientConfig, BackupConfig, OutputMode)
- Interfaces (IPageProvider, ISink, IProgressObserver)
- Error hierarchy rooted at TpBackupError
"""

from tpbackup.core.config import BackupConfig, ClientConfig, OutputMode
from tpbackup.core.errors import ConfigError, PageDecodeError, ResourceBackupError, TpBackupError
from tpbackup.core.interfaces import IPageProvider, IProgressObserver, ISink, SinkFactory
from tpbackup.core.models import BackupStats, ResourcePage, WorkerProgress

__all__ = [
    "BackupConfig",
    "ClientConfig",
    "OutputMode",
    "ConfigError",
    "PageDecodeError",
    "ResourceBackupError",
    "TpBackupError",
    "IPageProvider",
    "IProgressObserver",
    "ISink",
    "SinkFactory",
    "BackupStats",
    "ResourcePage",
    "WorkerProgress",
]
