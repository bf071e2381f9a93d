"""Core data models.

This module defines:
- `ResourcePage`: one decoded API page (the `{"Next", "Prev", "Items"}` envelope).
- `WorkerProgress`: per-worker progress state (current resource, done/total).
- `BackupStats`: aggregated counters for one backup run.

Design notes
------------
- Items are opaque JSON values; they are never inspected, only re-serialized.
- Pages are transient and never cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# === API page ===


class ResourcePage(BaseModel):
    """A single page of a resource collection as returned by the API."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    next: str | None = Field(default=None, alias="Next")
    prev: str | None = Field(default=None, alias="Prev")
    items: list[Any] = Field(alias="Items")

    @property
    def has_next(self) -> bool:
        return self.next is not None

    @property
    def is_empty(self) -> bool:
        return not self.items


# === Progress state ===


@dataclass(slots=True)
class WorkerProgress:
    """Progress of the resource a worker is currently backing up."""

    worker_id: int
    resource: str | None = None
    done: int = 0
    total: int = 0

    def reset(self) -> None:
        self.resource = None
        self.done = 0
        self.total = 0


# === Run stats ===


@dataclass(kw_only=True)
class BackupStats:
    """
    Aggregated counters for a backup run.

    Mutated by workers between awaits, so no lock is needed on one event loop.
    """

    resources_total: int = 0
    resources_done: int = 0
    resources_failed: int = 0
    items_written: int = 0
    failed: list[str] = field(default_factory=list)
