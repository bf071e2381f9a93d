"""Storage components for resource documents and archives.

This package provides:
- FileSink / SharedStreamSink / BufferSink: append-only byte sinks
- compress_dir_to_tar_gz / archive_and_remove: tar.gz packaging of a backup dir
"""

from tpbackup.storage.archive import archive_and_remove, compress_dir_to_tar_gz
from tpbackup.storage.sinks import BufferSink, FileSink, SharedStreamSink

__all__ = [
    "FileSink",
    "SharedStreamSink",
    "BufferSink",
    "compress_dir_to_tar_gz",
    "archive_and_remove",
]
