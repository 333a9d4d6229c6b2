"""The SQL tutorial: an ordered catalog of lessons over the houses data.

Every lesson is one query plus the prose that explains it. Queries refer to
three tables: ``houses`` (the spreadsheet or bundled sample), and the
synthetic ``owners`` and ``neighborhoods`` tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from sqlprimer.executor.runner import QueryRunner
from sqlprimer.model.relation import Relation

BIG_LOT_THRESHOLD = 10000


@dataclass(frozen=True)
class Lesson:
    """A single tutorial step."""

    key: str
    section: str
    title: str
    text: str
    query: str


LESSONS: list[Lesson] = [
    Lesson(
        key="select-all",
        section="selection",
        title="Looking at a table",
        text=(
            "SELECT * returns every column. LIMIT caps the number of rows, "
            "which keeps the output readable on a large table."
        ),
        query="SELECT * FROM houses LIMIT 5",
    ),
    Lesson(
        key="select-columns",
        section="selection",
        title="Choosing columns",
        text="List the columns you want after SELECT, separated by commas.",
        query="SELECT id, price, bedrooms, bathrooms FROM houses LIMIT 5",
    ),
    Lesson(
        key="count",
        section="selection",
        title="Counting rows",
        text="COUNT(*) counts the rows of the table.",
        query="SELECT COUNT(*) AS n FROM houses",
    ),
    Lesson(
        key="count-distinct",
        section="selection",
        title="Counting distinct values",
        text=(
            "COUNT(DISTINCT column) counts the different non-null values, "
            "here how many zipcodes the houses are spread over."
        ),
        query="SELECT COUNT(DISTINCT zipcode) AS zipcodes FROM houses",
    ),
    Lesson(
        key="where-and",
        section="filtering",
        title="Filtering with WHERE",
        text=(
            "WHERE keeps only rows for which the condition is true. "
            "Conditions combine with AND and OR."
        ),
        query="SELECT id, price FROM houses WHERE bathrooms = 2 AND sqft_living > 2000",
    ),
    Lesson(
        key="where-in",
        section="filtering",
        title="Matching a list of values",
        text="IN tests a value against a list; BETWEEN tests an inclusive range.",
        query=(
            "SELECT id, zipcode, price FROM houses "
            "WHERE zipcode IN (98003, 98028, 98074) AND price BETWEEN 200000 AND 500000"
        ),
    ),
    Lesson(
        key="order-by",
        section="sorting",
        title="Sorting results",
        text=(
            "ORDER BY sorts the result; DESC reverses the order. Combined with "
            "LIMIT it answers top-N questions such as the most expensive houses."
        ),
        query="SELECT id, price, sqft_living FROM houses ORDER BY price DESC LIMIT 5",
    ),
    Lesson(
        key="group-by",
        section="aggregation",
        title="Grouping rows",
        text=(
            "GROUP BY collapses rows sharing a value into one row per group. "
            "Aggregates such as COUNT and AVG are computed per group."
        ),
        query=(
            "SELECT bedrooms, COUNT(*) AS houses, ROUND(AVG(price), 2) AS avg_price "
            "FROM houses GROUP BY bedrooms ORDER BY bedrooms"
        ),
    ),
    Lesson(
        key="having",
        section="aggregation",
        title="Filtering groups",
        text="HAVING filters groups after aggregation, the way WHERE filters rows.",
        query=(
            "SELECT zipcode, COUNT(*) AS houses, MAX(price) AS top_price "
            "FROM houses GROUP BY zipcode HAVING COUNT(*) > 1 ORDER BY zipcode"
        ),
    ),
    Lesson(
        key="inner-join",
        section="joins",
        title="Inner join",
        text=(
            "An inner join pairs rows from two tables whose keys match. "
            "Rows without a partner on the other side are dropped."
        ),
        query=(
            "SELECT h.id, h.zipcode, n.region FROM houses AS h "
            "INNER JOIN neighborhoods AS n ON h.zipcode = n.zipcode "
            "ORDER BY h.id"
        ),
    ),
    Lesson(
        key="left-join",
        section="joins",
        title="Left join",
        text=(
            "A left join keeps every row of the left table. Where the right "
            "table has no match its columns are NULL."
        ),
        query=(
            "SELECT h.id, h.price, o.owner FROM houses AS h "
            "LEFT JOIN owners AS o ON h.id = o.id ORDER BY h.id"
        ),
    ),
    Lesson(
        key="derived-table",
        section="subqueries",
        title="Querying a query",
        text=(
            "A subquery in FROM acts as a temporary table. Here the inner query "
            "averages prices per zipcode and the outer one keeps the expensive ones."
        ),
        query=(
            "SELECT zipcode, avg_price FROM "
            "(SELECT zipcode, AVG(price) AS avg_price FROM houses GROUP BY zipcode) AS z "
            "WHERE avg_price > 400000 ORDER BY avg_price DESC"
        ),
    ),
    Lesson(
        key="scalar-subquery",
        section="subqueries",
        title="Comparing with a computed value",
        text="A subquery returning a single value can be used like a constant.",
        query=(
            "SELECT id, price FROM houses "
            "WHERE price > (SELECT AVG(price) FROM houses) ORDER BY price"
        ),
    ),
    Lesson(
        key="case",
        section="conditional",
        title="CASE expressions",
        text=(
            "CASE WHEN ... THEN ... ELSE ... END computes a value per row from "
            f"a condition. Lots larger than {BIG_LOT_THRESHOLD} sqft are flagged."
        ),
        query=(
            "SELECT id, sqft_lot, "
            f"CASE WHEN sqft_lot > {BIG_LOT_THRESHOLD} THEN 1 ELSE 0 END AS BigLot "
            "FROM houses ORDER BY id"
        ),
    ),
    Lesson(
        key="case-aggregate",
        section="conditional",
        title="Counting with CASE",
        text="Summing a CASE expression counts the rows that meet its condition.",
        query=(
            "SELECT n.region, COUNT(*) AS houses, "
            f"SUM(CASE WHEN h.sqft_lot > {BIG_LOT_THRESHOLD} THEN 1 ELSE 0 END) AS big_lots "
            "FROM houses AS h JOIN neighborhoods AS n ON h.zipcode = n.zipcode "
            "GROUP BY n.region ORDER BY n.region"
        ),
    ),
]

_BY_KEY = {lesson.key: lesson for lesson in LESSONS}


def get_lesson(key: str) -> Lesson:
    """Look up a lesson by key."""
    if key not in _BY_KEY:
        raise KeyError(f"Unknown lesson: {key!r}")
    return _BY_KEY[key]


def run_lesson(
    lesson: Lesson, runner: QueryRunner, relations: Mapping[str, Relation]
) -> Relation:
    """Run the lesson's query and return the result."""
    return runner.execute(lesson.query, relations)
