"""
Feed Assembler

Drives one pass over every row of the source document and builds the two
linked LIVES tables:

    row -> ColumnMapper -> normalize_record -> BusinessDeduplicator -> tables

All run state (the deduplicator and both tables) lives on the assembler
instance, so independent runs never interfere. The feed is all-or-nothing:
the first row that fails normalization aborts the run and no tables are
returned.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Any, Mapping, Optional

from ..common.feed_config import ColumnNames, FeedConfig
from ..normalizer.deduplicator import BusinessDeduplicator
from ..normalizer.models import Business, BusinessIdentifierStrategy, Inspection
from ..normalizer.normalize import normalize_record
from ..source_extractor.column_mapper import ColumnMapper, FieldRecord, extract_rows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedTables:
    """The data-dependent tables of one feed."""

    businesses: tuple[Business, ...]
    inspections: tuple[Inspection, ...]
    input_rows: int

    @property
    def stats(self) -> dict[str, int]:
        return {
            'input_rows': self.input_rows,
            'businesses': len(self.businesses),
            'inspections': len(self.inspections),
        }


class FeedAssembler:
    """
    Builds the businesses and inspections tables for a single run.

    Instances are single-use: create a new assembler for every feed.

    Usage:
        assembler = FeedAssembler(strategy=BusinessIdentifierStrategy.FACILITY)
        tables = assembler.assemble(document)
    """

    def __init__(
        self,
        strategy: BusinessIdentifierStrategy = BusinessIdentifierStrategy.FACILITY,
        columns: Optional[ColumnNames] = None,
        reporting_tz: tzinfo = timezone.utc,
    ):
        self.strategy = strategy
        self.columns = columns or ColumnNames()
        self.reporting_tz = reporting_tz

        self._deduplicator = BusinessDeduplicator()
        self._businesses: list[Business] = []
        self._inspections: list[Inspection] = []
        self._assembled = False

    @classmethod
    def from_config(
        cls,
        config: FeedConfig,
        strategy: BusinessIdentifierStrategy = BusinessIdentifierStrategy.FACILITY,
    ) -> "FeedAssembler":
        return cls(strategy=strategy, columns=config.columns, reporting_tz=config.feed.tzinfo)

    def add_record(self, record: FieldRecord, row_index: Optional[int] = None) -> bool:
        """
        Normalize one record and append its rows.

        Args:
            record: Named-field record from the ColumnMapper
            row_index: Position of the row in the document

        Returns:
            True if the record introduced a new business

        Raises:
            FeedError: If the record cannot be normalized
        """
        business, inspection = normalize_record(
            record,
            strategy=self.strategy,
            columns=self.columns,
            reporting_tz=self.reporting_tz,
            row_index=row_index,
        )

        is_new = self._deduplicator.observe(business.business_id)
        if is_new:
            self._businesses.append(business)
        self._inspections.append(inspection)
        return is_new

    def assemble(self, document: Mapping[str, Any]) -> FeedTables:
        """
        Build both tables from a decoded source document.

        Args:
            document: Decoded ``rows.json`` document

        Returns:
            FeedTables with businesses in first-seen order and inspections in
            source order

        Raises:
            MalformedInputError: If the document or a row has the wrong shape
            MalformedAddressError: If a row's address cannot be decoded
            MissingIdentifierError: If a row lacks a facility id under the
                facility strategy
            RuntimeError: If this assembler has already been used
        """
        if self._assembled:
            raise RuntimeError("FeedAssembler instances are single-use; create a new one per run")
        self._assembled = True

        start_time = datetime.now(timezone.utc)

        mapper = ColumnMapper.from_document(document)
        rows = extract_rows(document)

        logger.info(
            "Assembling feed tables",
            extra={
                'rows': len(rows),
                'columns': len(mapper.columns),
                'strategy': self.strategy.value,
            }
        )

        for row_index, record in mapper.iter_records(rows):
            self.add_record(record, row_index)

        tables = FeedTables(
            businesses=tuple(self._businesses),
            inspections=tuple(self._inspections),
            input_rows=len(rows),
        )

        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.info(
            "Feed tables assembled",
            extra={'duration_seconds': duration, **tables.stats}
        )

        return tables


def assemble_feed(
    document: Mapping[str, Any],
    config: Optional[FeedConfig] = None,
    strategy: BusinessIdentifierStrategy = BusinessIdentifierStrategy.FACILITY,
) -> FeedTables:
    """Assemble feed tables with a fresh assembler."""
    return FeedAssembler.from_config(config or FeedConfig(), strategy).assemble(document)
