"""
Result persistence for scrape runs.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Union

from ..base import ListingRecord

logger = logging.getLogger(__name__)


class JsonResultSink:
    """
    Writes the records of the latest run to a JSON file.

    The file is overwritten on every save; it always holds one run.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def save(self, records: Iterable[ListingRecord]) -> Path:
        """
        Persist records as a pretty-printed JSON array.

        Args:
            records: Listing records in page order

        Returns:
            Path of the written file
        """
        data = [record.to_dict() for record in records]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        logger.info(f"Saved {len(data)} listings to {self.path}")
        return self.path
