"""Packaging of a backup directory into a single ``.tar.gz``."""

from __future__ import annotations

import logging
import os
import shutil
import tarfile
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


def yyyymmddhhmm(now: datetime | None = None) -> str:
    """Local timestamp used in default archive names, e.g. ``202610181705``."""
    return (now or datetime.now()).strftime("%Y%m%d%H%M")


def default_archive_path(now: datetime | None = None) -> Path:
    return Path(f"tpbackup_{yyyymmddhhmm(now)}.tar.gz")


def compress_dir_to_tar_gz(dir_path: Path, output_path: Path) -> list[str]:
    """Write every top-level regular file of `dir_path` into a gzip tarball.

    Entries use the file name relative to `dir_path`; subdirectories are not
    archived. Returns the entry names in archive order.

    The tarball is written next to `output_path` under a ``.part`` name and
    renamed once complete, so a failed run never leaves a truncated archive.
    """
    names: list[str] = []
    part_path = output_path.with_name(output_path.name + ".part")
    try:
        with tarfile.open(part_path, "w:gz") as tar:
            for path in sorted(dir_path.iterdir()):
                if not path.is_file():
                    continue
                tar.add(path, arcname=path.name, recursive=False)
                names.append(path.name)
        os.replace(part_path, output_path)
    except BaseException:
        part_path.unlink(missing_ok=True)
        raise
    return names


def archive_and_remove(staging_dir: Path, output_path: Path) -> list[str]:
    """Archive `staging_dir` into `output_path`, then delete the staging directory.

    The staging directory is only removed once the archive was written.
    """
    names = compress_dir_to_tar_gz(staging_dir, output_path)
    logger.info("wrote %s (%d files)", output_path, len(names))
    shutil.rmtree(staging_dir)
    return names
