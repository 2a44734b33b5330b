"""Tabular queries over extracted comments.

Comments are loaded into an in-memory DuckDB connection as the
``comments`` view. Nothing is written to disk.

Run with: raterlens analyze data/evaluations.json
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

import duckdb
import pyarrow as pa

from .models import Comment
from .reliability import comment_category
from .sentiment import analyze_sentiment

COMMENT_SCHEMA = pa.schema([
    ("id", pa.string()),
    ("component", pa.string()),
    ("component_name", pa.string()),
    ("subfield", pa.string()),
    ("text", pa.string()),
    ("rating", pa.float64()),
    ("evaluator", pa.string()),
    ("evaluation_token", pa.string()),
    ("paper_id", pa.string()),
    ("paper_title", pa.string()),
    ("paper_doi", pa.string()),
    ("timestamp", pa.string()),  # ISO 8601; CAST in SQL when needed
    ("tier", pa.string()),
    ("composite_score", pa.float64()),
    ("role", pa.string()),
    ("sentiment", pa.string()),
    ("sentiment_score", pa.float64()),
    ("category", pa.string()),
])


def to_records(comments: Iterable[Comment]) -> list[dict]:
    """Flatten comments into rows, with sentiment precomputed."""
    records = []
    for comment in comments:
        sentiment = analyze_sentiment(comment.text)
        row = comment.model_dump(exclude={"expertise"})
        row.update(
            timestamp=comment.timestamp.isoformat() if comment.timestamp else None,
            tier=comment.tier,
            composite_score=comment.expertise.composite_score,
            sentiment=sentiment.category,
            sentiment_score=sentiment.normalized_score,
            category=comment_category(comment),
        )
        records.append(row)
    return records


def comments_table(comments: Iterable[Comment]) -> pa.Table:
    return pa.Table.from_pylist(to_records(comments), schema=COMMENT_SCHEMA)


def get_connection(comments: Iterable[Comment]) -> duckdb.DuckDBPyConnection:
    """Get an in-memory DuckDB connection with a ``comments`` view."""
    con = duckdb.connect()
    con.register("comments", comments_table(comments))
    return con


def run_query(con: duckdb.DuckDBPyConnection, title: str, query: str) -> None:
    """Run a query and print results."""
    print(f"\n=== {title} ===")
    con.sql(query).show()


def comments_per_component(con: duckdb.DuckDBPyConnection) -> None:
    """Comment volume and coverage per component."""
    run_query(con, "Comments per Component", """
        SELECT
            component_name,
            COUNT(*) as comments,
            COUNT(DISTINCT evaluation_token) as evaluations,
            COUNT(DISTINCT paper_id) as papers,
            ROUND(AVG(LENGTH(text)), 0) as avg_length
        FROM comments
        GROUP BY 1
        ORDER BY comments DESC
    """)


def sentiment_by_tier(con: duckdb.DuckDBPyConnection) -> None:
    """Coarse sentiment split per expertise tier."""
    run_query(con, "Sentiment by Expertise Tier", """
        SELECT
            tier,
            COUNT(*) as comments,
            ROUND(100.0 * SUM(CASE WHEN category = 'positive' THEN 1 ELSE 0 END) / COUNT(*), 1) as positive_pct,
            ROUND(100.0 * SUM(CASE WHEN category = 'neutral' THEN 1 ELSE 0 END) / COUNT(*), 1) as neutral_pct,
            ROUND(100.0 * SUM(CASE WHEN category = 'negative' THEN 1 ELSE 0 END) / COUNT(*), 1) as negative_pct,
            ROUND(AVG(sentiment_score), 3) as avg_score
        FROM comments
        GROUP BY 1
        ORDER BY comments DESC
    """)


def evaluator_activity(con: duckdb.DuckDBPyConnection) -> None:
    """Most active evaluators and how they tend to lean."""
    run_query(con, "Evaluator Activity", """
        SELECT
            COALESCE(evaluator, evaluation_token) as evaluator,
            ANY_VALUE(tier) as tier,
            COUNT(DISTINCT paper_id) as papers,
            COUNT(*) as comments,
            ROUND(AVG(sentiment_score), 3) as avg_score
        FROM comments
        GROUP BY 1
        ORDER BY comments DESC
        LIMIT 20
    """)


def rating_by_component(con: duckdb.DuckDBPyConnection) -> None:
    """Numeric ratings next to comment sentiment, per component."""
    run_query(con, "Rating by Component", """
        SELECT
            component_name,
            COUNT(rating) as rated,
            ROUND(AVG(rating), 2) as avg_rating,
            ROUND(MIN(rating), 2) as min_rating,
            ROUND(MAX(rating), 2) as max_rating,
            ROUND(AVG(sentiment_score), 3) as avg_sentiment
        FROM comments
        GROUP BY 1
        HAVING COUNT(rating) > 0
        ORDER BY avg_rating DESC
    """)


QUERIES: dict[str, Callable[[duckdb.DuckDBPyConnection], None]] = {
    "components": comments_per_component,
    "tiers": sentiment_by_tier,
    "evaluators": evaluator_activity,
    "ratings": rating_by_component,
}


def run_all(con: duckdb.DuckDBPyConnection) -> None:
    """Run all analysis queries."""
    result = con.execute("SELECT COUNT(*), COUNT(DISTINCT evaluation_token) FROM comments").fetchone()
    total, evaluations = result if result else (0, 0)

    print("=" * 60)
    print("raterlens: Evaluator Feedback Tables")
    print("=" * 60)
    print(f"\nComments: {total:,} from {evaluations:,} evaluations")

    for query in QUERIES.values():
        query(con)
