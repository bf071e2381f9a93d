from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import httpx

from tpbackup.core.errors import ConfigError

STDOUT_CONCURRENCY = 1
FILES_CONCURRENCY = 5


class OutputMode(str, Enum):
    """Where resource documents end up."""

    FILES = "files"
    STDOUT = "stdout"
    ARCHIVE = "archive"


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for the remote API (immutable, passed explicitly)."""

    host: str
    user: str
    password: str = field(repr=False)
    timeout_s: float = 30.0
    max_connections: int = 16

    @property
    def endpoint(self) -> str:
        """Return the API root, e.g. ``https://myinstance.tpondemand.com/api/v1/``."""
        msg = f'Unable to construct valid endpoint url with the provided host name "{self.host}"'
        host = (self.host or "").strip()
        if not host or any(c in host for c in " /?#@\\"):
            raise ConfigError(msg)
        try:
            url = httpx.URL(f"https://{host}/api/v1/")
        except httpx.InvalidURL as e:
            raise ConfigError(msg) from e
        if not url.host:
            raise ConfigError(msg)
        return str(url)


@dataclass(frozen=True)
class BackupConfig:
    """Configuration for one backup run."""

    client: ClientConfig
    resources: tuple[str, ...]
    mode: OutputMode = OutputMode.FILES
    out_dir: Path = Path("./out")
    archive_path: Path | None = None
    progress: bool = True
    concurrency: int | None = None
    continue_on_error: bool = False
    staging_root: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))

    def __post_init__(self) -> None:
        if not self.resources:
            raise ConfigError("No resources selected for backup")
        if self.concurrency is not None and self.concurrency < 1:
            raise ConfigError("concurrency must be >= 1")
        if self.archive_path is not None and self.mode is not OutputMode.ARCHIVE:
            raise ConfigError("archive_path is only valid in archive mode")

    @property
    def effective_concurrency(self) -> int:
        if self.concurrency is not None:
            return self.concurrency
        return STDOUT_CONCURRENCY if self.mode is OutputMode.STDOUT else FILES_CONCURRENCY

    @property
    def effective_progress(self) -> bool:
        return self.progress and self.mode is not OutputMode.STDOUT
