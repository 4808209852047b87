"""
Business Deduplication

The source has one row per inspection, so a restaurant inspected ten times
appears ten times. LIVES wants each business exactly once: the first row seen
for a business_id defines its row in businesses.csv and later rows only
contribute inspections.

A deduplicator belongs to a single feed run. It is not thread-safe and is
never shared between runs.
"""

import logging

logger = logging.getLogger(__name__)


class BusinessDeduplicator:
    """
    Remembers which business ids have already been emitted.

    Usage:
        dedup = BusinessDeduplicator()
        dedup.observe("10637887")  # True, first sighting
        dedup.observe("10637887")  # False
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def observe(self, business_id: str) -> bool:
        """
        Record a business id.

        Args:
            business_id: Id of the business about to be emitted

        Returns:
            True the first time the id is passed, False on every later call
        """
        if business_id in self._seen:
            logger.debug("Duplicate business skipped", extra={'business_id': business_id})
            return False

        self._seen.add(business_id)
        return True

    def __contains__(self, business_id: object) -> bool:
        return business_id in self._seen

    def __len__(self) -> int:
        return len(self._seen)
