import logging
from typing import Dict, Iterable, Iterator, Tuple

from .models import RatingRecord

logger = logging.getLogger(__name__)


class ResultAggregator:
    """Append-only, ordered collection of rating records for one run.

    Records keep the order they were appended in (course discovery order,
    then version order within a course). Nothing is de-duplicated.
    """

    def __init__(self):
        self._records = []

    def append(self, record: RatingRecord) -> None:
        self._records.append(record)
        logger.debug("Recorded %s -> %s", record.course_version, record.rating)

    def extend(self, records: Iterable[RatingRecord]) -> None:
        for record in records:
            self.append(record)

    def all_records(self) -> Tuple[RatingRecord, ...]:
        return tuple(self._records)

    def has_rating(self) -> bool:
        return any(not r.is_placeholder for r in self._records)

    def summary(self) -> Dict[str, int]:
        rated = sum(1 for r in self._records if not r.is_placeholder)
        return {"records": len(self._records), "rated": rated, "not_found": len(self._records) - rated}

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RatingRecord]:
        return iter(tuple(self._records))
