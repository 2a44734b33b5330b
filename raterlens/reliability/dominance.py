"""Shared sentiment bucketing for every agreement metric.

Intersection, Kappa, consensus and tier comparisons all categorize
comments and pick dominants through these functions, so their
percentages stay consistent with each other.
"""

from collections.abc import Iterable, Mapping

from ..models import Comment
from ..sentiment import COARSE_LABELS, analyze_sentiment, categorize_sentiment
from ..sentiment.categories import NEUTRAL


def comment_category(comment: Comment | str) -> str:
    """positive / neutral / negative for one comment."""
    text = comment.text if isinstance(comment, Comment) else comment
    return categorize_sentiment(analyze_sentiment(text).category)


def count_categories(comments: Iterable[Comment | str]) -> dict[str, int]:
    counts = dict.fromkeys(COARSE_LABELS, 0)
    for comment in comments:
        counts[comment_category(comment)] += 1
    return counts


def dominant_category(counts: Mapping[str, int], strict: bool = False) -> str:
    """Dominant coarse category of a count table.

    Non-strict: the most frequent category; ties go to the first of
    positive, neutral, negative. Strict: the category holding more than
    half of all counts, else neutral.
    """
    total = sum(counts.get(label, 0) for label in COARSE_LABELS)
    if strict:
        for label in COARSE_LABELS:
            if total and counts.get(label, 0) / total > 0.5:
                return label
        return NEUTRAL
    # max() keeps the first maximal element
    return max(COARSE_LABELS, key=lambda label: counts.get(label, 0))
