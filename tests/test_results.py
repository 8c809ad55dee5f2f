"""Tests for rating records and the result aggregator"""

from course_ratings.models import (
    NOT_FOUND,
    UNKNOWN_VERSION,
    CourseRef,
    RatingRecord,
)
from course_ratings.results import ResultAggregator

NODE = CourseRef("Node.js & MongoDB", "https://example.test/teach/node")
PY = CourseRef("Python for Data Science", "https://example.test/teach/python")


def test_course_ref_identity_is_the_link():
    assert CourseRef("Other title", NODE.link) == NODE
    assert len({NODE, CourseRef("x", NODE.link), PY}) == 2


def test_record_key_and_row():
    record = RatingRecord.for_version(NODE, "v1", "4.7", "5 stars: 80%")
    assert record.course_version == "Node.js & MongoDB - v1"
    assert record.as_row() == {
        "Course Version": "Node.js & MongoDB - v1",
        "Rating": "4.7",
        "Rating Stats": "5 stars: 80%",
    }
    assert not record.is_placeholder


def test_placeholder_record():
    record = RatingRecord.placeholder(NODE, UNKNOWN_VERSION)
    assert record.course_version == "Node.js & MongoDB - Unknown Version"
    assert record.rating == NOT_FOUND
    assert record.rating_stats == NOT_FOUND
    assert record.is_placeholder


def test_aggregator_preserves_entity_then_variant_order():
    results = ResultAggregator()
    expected = []
    for course in (NODE, PY):
        for version in ("v1", "v2", "v3"):
            record = RatingRecord.for_version(course, version, "4.5")
            results.append(record)
            expected.append(record)

    assert list(results.all_records()) == expected
    assert [r.course_version for r in results][:3] == [
        "Node.js & MongoDB - v1",
        "Node.js & MongoDB - v2",
        "Node.js & MongoDB - v3",
    ]
    assert len(results) == 6


def test_aggregator_does_not_deduplicate():
    results = ResultAggregator()
    record = RatingRecord.for_version(NODE, "v1", "4.7")
    results.extend([record, record])
    assert len(results) == 2


def test_all_records_is_a_snapshot():
    results = ResultAggregator()
    results.append(RatingRecord.for_version(NODE, "v1", "4.7"))
    snapshot = results.all_records()
    results.append(RatingRecord.for_version(NODE, "v2", "4.1"))
    assert len(snapshot) == 1
    assert len(results.all_records()) == 2


def test_has_rating_and_summary():
    results = ResultAggregator()
    assert not results.has_rating()

    results.append(RatingRecord.placeholder(NODE, "v1"))
    assert not results.has_rating()

    results.append(RatingRecord.for_version(NODE, "v2", "4.2"))
    assert results.has_rating()
    assert results.summary() == {"records": 2, "rated": 1, "not_found": 1}
