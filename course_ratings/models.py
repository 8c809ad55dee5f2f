from dataclasses import dataclass, field
from typing import Dict

NOT_FOUND = "Not found"
DEFAULT_VERSION = "Default Version"   # course page shows no version switcher
UNKNOWN_VERSION = "Unknown Version"   # course page itself could not be processed

REPORT_COLUMNS = ("Course Version", "Rating", "Rating Stats")


@dataclass(frozen=True)
class CourseRef:
    title: str = field(compare=False)           # link text as shown in the results table
    link: str                                   # course admin URL (identity)


@dataclass(frozen=True)
class CourseVersion:
    label: str                                  # e.g. "Version 3 (live)"


@dataclass(frozen=True)
class RatingRecord:
    course_version: str                         # "<course title> - <version label>"
    rating: str                                 # raw displayed value or NOT_FOUND
    rating_stats: str = ""                      # ratings breakdown, optional

    @classmethod
    def for_version(cls, course: CourseRef, version: str, rating: str, rating_stats: str = "") -> "RatingRecord":
        return cls(f"{course.title} - {version}", rating, rating_stats)

    @classmethod
    def placeholder(cls, course: CourseRef, version: str) -> "RatingRecord":
        return cls.for_version(course, version, NOT_FOUND, NOT_FOUND)

    @property
    def is_placeholder(self) -> bool:
        return self.rating == NOT_FOUND

    def as_row(self) -> Dict[str, str]:
        return dict(zip(REPORT_COLUMNS, (self.course_version, self.rating, self.rating_stats)))
