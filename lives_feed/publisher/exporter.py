"""
Feed export and packaging.

Writes the four LIVES tables and README.txt, then zips them into a single
archive. Everything is produced inside a private temporary directory and the
finished archive is swapped into its destination last, so a failed run never
leaves a partial feed behind.
"""

import csv
import logging
import os
import shutil
import tempfile
import zipfile
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from ..common.feed_config import FeedConfig
from ..normalizer.models import BUSINESS_COLUMNS, INSPECTION_COLUMNS, BusinessIdentifierStrategy
from .assembler import FeedTables, assemble_feed
from .static_tables import (
    FEED_INFO_COLUMNS,
    LEGEND_COLUMNS,
    feed_info_rows,
    legend_rows,
    render_readme,
)

logger = logging.getLogger(__name__)

BUSINESSES_FILENAME = "businesses.csv"
INSPECTIONS_FILENAME = "inspections.csv"
FEED_INFO_FILENAME = "feed_info.csv"
LEGEND_FILENAME = "legend.csv"
README_FILENAME = "README.txt"


@dataclass(frozen=True)
class FeedResult:
    """Outcome of a successful feed build."""

    archive_path: Path
    input_rows: int
    businesses: int
    inspections: int


def write_table(path: Path, header: Sequence[str], rows: Iterable[Sequence[Any]]) -> int:
    """
    Write one CSV table with a header row. None values become empty fields.

    Returns:
        Number of data rows written
    """
    count = 0
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(header)
        for row in rows:
            writer.writerow(row)
            count += 1

    logger.debug("Wrote table", extra={'path': str(path), 'rows': count})
    return count


def write_feed(
    tables: FeedTables,
    directory: Path,
    config: FeedConfig,
    feed_date: date,
) -> list[Path]:
    """
    Write the feed files into ``directory``.

    Returns:
        Paths of the written files, in archive order
    """
    directory.mkdir(parents=True, exist_ok=True)

    businesses_path = directory / BUSINESSES_FILENAME
    inspections_path = directory / INSPECTIONS_FILENAME
    feed_info_path = directory / FEED_INFO_FILENAME
    legend_path = directory / LEGEND_FILENAME
    readme_path = directory / README_FILENAME

    write_table(businesses_path, BUSINESS_COLUMNS, (b.to_row() for b in tables.businesses))
    write_table(inspections_path, INSPECTION_COLUMNS, (i.to_row() for i in tables.inspections))
    write_table(feed_info_path, FEED_INFO_COLUMNS, feed_info_rows(config.feed, feed_date))
    write_table(legend_path, LEGEND_COLUMNS, legend_rows())
    readme_path.write_text(
        render_readme(config.feed, config.source.url, feed_date), encoding="utf-8"
    )

    return [businesses_path, inspections_path, feed_info_path, legend_path, readme_path]


def package_feed(files: Sequence[Path], archive_path: Path) -> Path:
    """Zip ``files`` flat (no directories) into ``archive_path``."""
    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for path in files:
            archive.write(path, arcname=path.name)

    logger.info(
        "Packaged feed archive",
        extra={'archive_path': str(archive_path), 'files': [p.name for p in files]}
    )
    return archive_path


def publish_archive(archive: Path, destination: Path) -> Path:
    """
    Copy a finished archive to ``destination`` and swap it into place.

    The copy is staged as a hidden sibling of ``destination`` and renamed over
    it with ``os.replace``. The staged file is removed if anything fails.
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    staged = destination.with_name(f".{destination.name}.partial")

    try:
        shutil.copyfile(archive, staged)
        os.replace(staged, destination)
    except BaseException:
        staged.unlink(missing_ok=True)
        raise

    return destination


def build_feed(
    document: Mapping[str, Any],
    destination: Union[str, Path],
    config: Optional[FeedConfig] = None,
    strategy: BusinessIdentifierStrategy = BusinessIdentifierStrategy.FACILITY,
    feed_date: Optional[date] = None,
) -> FeedResult:
    """
    Build a complete LIVES feed archive from a decoded source document.

    The tables are assembled in memory first; nothing is written if any row
    fails. Files are then written and zipped in a temporary directory and the
    archive is published to ``destination`` only once it is complete.

    Args:
        document: Decoded ``rows.json`` document
        destination: Path of the archive to create (parents are created).
            An existing directory receives ``config.feed.archive_name``.
        config: Feed configuration; defaults apply when omitted
        strategy: Business id strategy for the whole run
        feed_date: Date recorded in feed_info.csv; defaults to today in the
            reporting zone

    Returns:
        FeedResult with the archive path and row counts

    Raises:
        FeedError: If the document cannot be turned into a feed
        OSError: If the archive cannot be written
    """
    config = config or FeedConfig()
    destination = Path(destination)
    feed_date = feed_date or datetime.now(config.feed.tzinfo).date()

    tables = assemble_feed(document, config, strategy)

    with tempfile.TemporaryDirectory(prefix="lives-feed-") as tmp:
        workdir = Path(tmp)
        files = write_feed(tables, workdir / "feed", config, feed_date)
        archive = package_feed(files, workdir / "feed.zip")

        if destination.is_dir():
            destination = destination / config.feed.archive_name
        publish_archive(archive, destination)

    logger.info(
        "Feed published",
        extra={'archive_path': str(destination), **tables.stats}
    )

    return FeedResult(
        archive_path=destination,
        input_rows=tables.input_rows,
        businesses=len(tables.businesses),
        inspections=len(tables.inspections),
    )
