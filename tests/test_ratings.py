"""Tests for per-course version resolution and rating extraction"""

from course_ratings.models import NOT_FOUND, CourseRef, CourseVersion
from course_ratings.ratings import CoursePage, CourseRatingsScraper, parse_rating_stats
from course_ratings.results import ResultAggregator
from fakes import FakeCourse

NODE = CourseRef("Node.js & MongoDB", "https://www.coursera.org/teach/node/versions")
PY = CourseRef("Python for Data Science", "https://www.coursera.org/teach/python/versions")

STATS_HTML = """
<ul>
  <li><span>5 stars</span><span>80%</span></li>
  <li><span>4 stars</span> <span>15%</span></li>
  <li><span>1 star</span><span>5%</span></li>
</ul>
"""


def scraper_for(driver, config, results=None):
    return CourseRatingsScraper(driver, config, results, on_failure=driver.capture_diagnostic)


def test_get_versions(make_driver, config):
    driver = make_driver(courses={NODE.link: FakeCourse(versions=["v1", "v2"])})
    driver.navigate(NODE.link)
    assert CoursePage(driver, config).get_versions() == [CourseVersion("v1"), CourseVersion("v2")]


def test_get_versions_without_switcher(make_driver, config):
    driver = make_driver(courses={NODE.link: FakeCourse()})
    driver.navigate(NODE.link)
    assert CoursePage(driver, config).get_versions() == []


def test_one_record_per_version(make_driver, config):
    driver = make_driver(courses={
        NODE.link: FakeCourse(versions=["v1", "v2"], ratings={"v1": "4.7", "v2": "4.5"}),
    })

    records = scraper_for(driver, config).process_course(NODE)

    assert [r.course_version for r in records] == ["Node.js & MongoDB - v1", "Node.js & MongoDB - v2"]
    assert [r.rating for r in records] == ["4.7", "4.5"]
    # course page is reloaded before each version
    assert driver.navigations == [NODE.link, NODE.link, NODE.link]


def test_course_without_versions_uses_default_version(make_driver, config):
    driver = make_driver(courses={NODE.link: FakeCourse(ratings={"Default Version": "4.6"})})

    records = scraper_for(driver, config).process_course(NODE)

    assert len(records) == 1
    assert records[0].course_version == "Node.js & MongoDB - Default Version"
    assert records[0].rating == "4.6"


def test_failing_version_does_not_affect_sibling(make_driver, config):
    driver = make_driver(courses={
        NODE.link: FakeCourse(versions=["v1", "v2"], ratings={"v1": RuntimeError("boom"), "v2": "4.8"}),
    })

    records = scraper_for(driver, config).process_course(NODE)

    assert len(records) == 2
    assert records[0].rating == NOT_FOUND
    assert records[0].rating_stats == NOT_FOUND
    assert records[1].rating == "4.8"
    assert len(driver.diagnostics) == 1
    assert driver.diagnostics[0].startswith("version-failure-")


def test_missing_rating_is_not_found(make_driver, config):
    driver = make_driver(courses={NODE.link: FakeCourse(versions=["v1"], ratings={"v1": None})})

    records = scraper_for(driver, config).process_course(NODE)

    assert [r.rating for r in records] == [NOT_FOUND]


def test_blank_rating_is_not_found(make_driver, config):
    driver = make_driver(courses={NODE.link: FakeCourse(ratings={"Default Version": "   "})})

    records = scraper_for(driver, config).process_course(NODE)

    assert records[0].rating == NOT_FOUND


def test_unreachable_course_yields_single_unknown_record(make_driver, config):
    driver = make_driver(courses={NODE.link: FakeCourse(versions=["v1", "v2"])})
    driver.failing_links.add(NODE.link)

    records = scraper_for(driver, config).process_course(NODE)

    assert len(records) == 1
    assert records[0].course_version == "Node.js & MongoDB - Unknown Version"
    assert records[0].is_placeholder
    assert driver.diagnostics == ["course-failure-node-js-mongodb"]


def test_course_page_not_ready_yields_unknown_record(make_driver, config):
    driver = make_driver(courses={NODE.link: FakeCourse(versions=["v1"])})
    driver.ready = False

    records = scraper_for(driver, config).process_course(NODE)

    assert [r.course_version for r in records] == ["Node.js & MongoDB - Unknown Version"]


def test_rating_text_is_whitespace_normalized(make_driver, config):
    driver = make_driver(courses={NODE.link: FakeCourse(ratings={"Default Version": "  4.7 \n out of 5 "})})

    records = scraper_for(driver, config).process_course(NODE)

    assert records[0].rating == "4.7 out of 5"


def test_rating_stats_are_collected(make_driver, config):
    driver = make_driver(courses={NODE.link: FakeCourse(ratings={"Default Version": "4.7"}, stats_html=STATS_HTML)})

    records = scraper_for(driver, config).process_course(NODE)

    assert records[0].rating_stats == "5 stars: 80%; 4 stars: 15%; 1 star: 5%"


def test_process_courses_appends_in_order(make_driver, config):
    driver = make_driver(courses={
        NODE.link: FakeCourse(versions=["v1", "v2"], ratings={"v1": "4.7", "v2": "4.5"}),
        PY.link: FakeCourse(ratings={"Default Version": "4.2"}),
    })
    results = ResultAggregator()

    returned = scraper_for(driver, config, results).process_courses([NODE, PY, NODE])

    keys = [r.course_version for r in results.all_records()]
    assert keys == [
        "Node.js & MongoDB - v1",
        "Node.js & MongoDB - v2",
        "Python for Data Science - Default Version",
        "Node.js & MongoDB - v1",
        "Node.js & MongoDB - v2",
    ]
    assert list(results.all_records()) == returned


def test_parse_rating_stats_table():
    html = "<table><tr><td>5 stars</td><td>120</td></tr><tr><td>4 stars</td><td>30</td></tr></table>"
    assert parse_rating_stats(html) == "5 stars: 120; 4 stars: 30"


def test_parse_rating_stats_plain_text():
    assert parse_rating_stats("<div>  Based on\n 1,204 ratings </div>") == "Based on 1,204 ratings"


def test_parse_rating_stats_empty():
    assert parse_rating_stats("") == ""


def test_switcher_drawn_after_load_still_yields_every_version(make_driver, config):
    driver = make_driver(courses={
        NODE.link: FakeCourse(versions=["v1", "v2"], ratings={"v1": "4.7", "v2": "4.5"}),
    })
    driver.late_switcher = True

    records = scraper_for(driver, config).process_course(NODE)

    assert [r.course_version for r in records] == ["Node.js & MongoDB - v1", "Node.js & MongoDB - v2"]
    assert [r.rating for r in records] == ["4.7", "4.5"]
    assert (config.selectors.version_switcher, "visible", config.switcher_timeout) in driver.waits
