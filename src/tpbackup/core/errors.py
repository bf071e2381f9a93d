from __future__ import annotations

from collections.abc import Sequence


class TpBackupError(Exception):
    """Base class for all errors raised by tpbackup."""


class ConfigError(TpBackupError, ValueError):
    """Invalid configuration detected before any work started."""


class PageDecodeError(TpBackupError, ValueError):
    """A page body could not be decoded into the expected envelope."""

    def __init__(self, resource: str, skip: int, reason: str) -> None:
        super().__init__(f"Malformed page for {resource!r} at skip={skip}: {reason}")
        self.resource = resource
        self.skip = skip


class ResourceBackupError(TpBackupError, RuntimeError):
    """One or more resources failed to back up.

    The original exception (for a single failure) is chained as ``__cause__``.
    """

    def __init__(self, resources: Sequence[str], detail: str | None = None) -> None:
        self.resources = list(resources)
        names = ", ".join(self.resources)
        msg = f"Backup failed for resource(s): {names}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
