"""
LIVES Feed Builder - Main Entry Point

This is the command-line interface for building a LIVES feed archive from the
restaurant inspection dataset.

Usage:
    python -m lives_feed.main [OPTIONS]

Options:
    --source-url URL      Download the source document from URL
    --source-file PATH    Read the source document from a local file
    --output PATH         Archive to create (default: archive name from config)
    --legacy-ids          Derive business ids by hashing name|street
    --config PATH         Alternate feed configuration file
    --dry-run             Assemble the tables and report counts without writing
    --verbose             Enable debug logging
    --help                Show this message and exit

Examples:
    # Build the feed from the configured open data URL:
    python -m lives_feed.main

    # Build from a local export with historical hashed ids:
    python -m lives_feed.main --source-file rows.json --legacy-ids

    # Check a document without writing anything:
    python -m lives_feed.main --source-file rows.json --dry-run

Exit Codes:
    0: Success
    1: The source data could not be turned into a feed (malformed rows)
    2: Fatal error (download, configuration, filesystem, etc.)
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from .common.errors import ConfigError, FeedError, SourceFetchError
from .common.feed_config import FeedConfig, load_feed_config
from .normalizer.models import BusinessIdentifierStrategy
from .publisher.assembler import assemble_feed
from .publisher.exporter import build_feed
from .source_extractor.fetcher import fetch_source_document, load_source_document

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description='Build a LIVES restaurant inspection feed archive',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        '--source-url',
        type=str,
        help='URL of the rows.json document (default: source.url from config)',
        default=None,
        dest='source_url'
    )
    source.add_argument(
        '--source-file',
        type=Path,
        help='Local rows.json document to read instead of downloading',
        default=None,
        dest='source_file'
    )

    parser.add_argument(
        '--output',
        type=Path,
        help='Path of the archive to create (default: feed.archive_name from config)',
        default=None
    )

    parser.add_argument(
        '--legacy-ids',
        action='store_true',
        help='Derive business ids from a hash of name and street instead of the facility id',
        dest='legacy_ids'
    )

    parser.add_argument(
        '--config',
        type=str,
        help='Path to an alternate feed.yml',
        default=None
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Assemble the tables and report counts without writing the archive',
        dest='dry_run'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args(argv)


def run(args: argparse.Namespace, config: FeedConfig) -> dict[str, int]:
    """
    Retrieve the source document and build (or dry-run) the feed.

    Args:
        args: Parsed command-line arguments
        config: Loaded feed configuration

    Returns:
        Dictionary with statistics:
        - input_rows: Rows in the source document
        - businesses: Rows in businesses.csv
        - inspections: Rows in inspections.csv
    """
    strategy = (
        BusinessIdentifierStrategy.LEGACY if args.legacy_ids
        else BusinessIdentifierStrategy.FACILITY
    )

    if args.source_file:
        document = load_source_document(args.source_file)
    else:
        document = fetch_source_document(
            args.source_url or config.source.url,
            timeout=config.source.timeout_seconds,
        )

    if args.dry_run:
        tables = assemble_feed(document, config, strategy)
        logger.info(
            "DRY RUN: Would write %d businesses and %d inspections",
            len(tables.businesses),
            len(tables.inspections),
            extra=tables.stats
        )
        return tables.stats

    destination = args.output or Path(config.feed.archive_name)
    result = build_feed(document, destination, config=config, strategy=strategy)

    print(f"Feed archive created: {result.archive_path}")
    return {
        'input_rows': result.input_rows,
        'businesses': result.businesses,
        'inspections': result.inspections,
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the feed builder.

    Returns:
        Exit code (0 = success, 1 = malformed source data, 2 = fatal error)
    """
    args = parse_args(argv)
    configure_logging(args.verbose)

    if args.verbose:
        logger.debug("Debug logging enabled")

    try:
        config = load_feed_config(args.config)
    except (ConfigError, FileNotFoundError) as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    try:
        stats = run(args, config)
        logger.info("Feed build completed successfully", extra=stats)
        return 0

    except SourceFetchError as e:
        logger.error("Could not retrieve source document: %s", e)
        return 2

    except FeedError as e:
        logger.error(
            "Source data could not be converted, no feed written: %s",
            e,
            extra={'error_type': type(e).__name__, 'row_index': e.row_index}
        )
        return 1

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130

    except Exception as e:
        logger.error(
            "Unexpected fatal error",
            extra={
                'error': str(e),
                'error_type': type(e).__name__,
            },
            exc_info=True
        )
        return 2


if __name__ == '__main__':
    sys.exit(main())
