"""
Static feed tables.

feed_info.csv and legend.csv do not depend on the inspection data; they are
built from configuration and constants. README.txt ships in the archive next
to the tables.
"""

from datetime import date
from typing import Any

from ..common.feed_config import FeedSettings

FEED_INFO_COLUMNS = (
    "feed_date",
    "feed_version",
    "municipality_name",
    "municipality_url",
    "contact_email",
)

LEGEND_COLUMNS = ("minimum_score", "maximum_score", "description")

LEGEND_ROWS: tuple[tuple[Any, ...], ...] = (
    (70, 100, "pass"),
    (0, 69, "re-inspection required"),
)

README_TEMPLATE = """\
{municipality_name} restaurant inspections - LIVES feed
{underline}

This archive contains restaurant inspection results for {municipality_name}
in the LIVES format (https://www.yelp.com/healthscores).

Files
-----
businesses.csv   one row per inspected business
inspections.csv  one row per inspection, linked to businesses.csv by business_id
feed_info.csv    feed metadata (generation date, version, publisher)
legend.csv       meaning of score ranges

Inspection scores range from 0 to 100. A score of 70 or above is a pass;
below 70 a re-inspection is required.

Source data: {source_url}
More information: {municipality_url}
Generated: {feed_date}
"""


def feed_info_rows(settings: FeedSettings, feed_date: date) -> list[tuple[Any, ...]]:
    """Single data row for feed_info.csv."""
    return [
        (
            feed_date.strftime("%Y%m%d"),
            settings.version,
            settings.municipality_name,
            settings.municipality_url,
            settings.contact_email,
        )
    ]


def legend_rows() -> list[tuple[Any, ...]]:
    return list(LEGEND_ROWS)


def render_readme(settings: FeedSettings, source_url: str, feed_date: date) -> str:
    title = f"{settings.municipality_name} restaurant inspections - LIVES feed"
    return README_TEMPLATE.format(
        municipality_name=settings.municipality_name,
        underline="=" * len(title),
        source_url=source_url,
        municipality_url=settings.municipality_url,
        feed_date=feed_date.isoformat(),
    )
