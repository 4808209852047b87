"""
Publisher Service

Assembles the LIVES businesses/inspections tables from a source document,
adds the static feed_info/legend tables and README, and packages everything
as a zip archive.
"""

from .assembler import FeedAssembler, FeedTables, assemble_feed
from .exporter import (
    FeedResult,
    build_feed,
    package_feed,
    publish_archive,
    write_feed,
    write_table,
)

__all__ = [
    "FeedAssembler",
    "FeedResult",
    "FeedTables",
    "assemble_feed",
    "build_feed",
    "package_feed",
    "publish_archive",
    "write_feed",
    "write_table",
]
