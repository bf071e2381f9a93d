from __future__ import annotations

from .constants import CHUNK, DETECTION_START, RESOURCES
from .core.config import BackupConfig, ClientConfig, OutputMode
from .core.errors import ConfigError, PageDecodeError, ResourceBackupError, TpBackupError
from .core.use_cases.backup import BackupService, estimate_size, stream_resource

__version__ = "0.1.0"

__all__ = [
    "BackupService",
    "estimate_size",
    "stream_resource",
    "BackupConfig",
    "ClientConfig",
    "OutputMode",
    "TpBackupError",
    "ConfigError",
    "PageDecodeError",
    "ResourceBackupError",
    "RESOURCES",
    "CHUNK",
    "DETECTION_START",
]
