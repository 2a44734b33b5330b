"""Sentiment category labels and thresholds.

The classifier emits one of five fine labels; every agreement metric
works on the three coarse ones. Keep both mappings here so all reports
bucket comments the same way.
"""

from __future__ import annotations

POSITIVE = "positive"
SLIGHTLY_POSITIVE = "slightly_positive"
NEUTRAL = "neutral"
SLIGHTLY_NEGATIVE = "slightly_negative"
NEGATIVE = "negative"

FINE_LABELS = (POSITIVE, SLIGHTLY_POSITIVE, NEUTRAL, SLIGHTLY_NEGATIVE, NEGATIVE)

# Order doubles as the tie-break when picking a dominant category
COARSE_LABELS = (POSITIVE, NEUTRAL, NEGATIVE)

# normalized score thresholds
POSITIVE_AT = 0.65
SLIGHTLY_POSITIVE_AT = 0.55
NEGATIVE_AT = 0.35
SLIGHTLY_NEGATIVE_AT = 0.45

_COARSE = {
    POSITIVE: POSITIVE,
    SLIGHTLY_POSITIVE: POSITIVE,
    NEUTRAL: NEUTRAL,
    SLIGHTLY_NEGATIVE: NEGATIVE,
    NEGATIVE: NEGATIVE,
}


def label_for_score(normalized_score: float) -> str:
    """Map a normalized score in [0, 1] to a fine label."""
    if normalized_score >= POSITIVE_AT:
        return POSITIVE
    if normalized_score >= SLIGHTLY_POSITIVE_AT:
        return SLIGHTLY_POSITIVE
    if normalized_score <= NEGATIVE_AT:
        return NEGATIVE
    if normalized_score <= SLIGHTLY_NEGATIVE_AT:
        return SLIGHTLY_NEGATIVE
    return NEUTRAL


def categorize_sentiment(label: str | None) -> str:
    """Collapse a fine label to positive / neutral / negative.

    Unknown labels are neutral. Coarse labels map to themselves.
    """
    return _COARSE.get(label, NEUTRAL) if isinstance(label, str) else NEUTRAL
