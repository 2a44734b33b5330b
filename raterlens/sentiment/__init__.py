"""Sentiment analysis for evaluator feedback.

Philosophy: agreement metrics are only as trustworthy as the labels
under them, so the classifier is a fixed lexicon, not a model. The same
comment gets the same label on every run.

This module provides:
- Per-comment sentiment (lexicon + intensifiers + negation)
- Five fine labels and their three coarse buckets
- Aggregate sentiment and keyword themes over many comments
- Sentiment by comment length and per-theme breakdowns
"""

from .analyzer import (
    CommentAnalysis,
    LengthBucket,
    LengthPatterns,
    SentimentSummary,
    ThemeFrequency,
    ThemeSummary,
    analyze_comment,
    analyze_multiple_comments,
    analyze_length_patterns,
    analyze_theme_frequency,
    extract_themes,
)
from .categories import COARSE_LABELS, FINE_LABELS, categorize_sentiment
from .classifier import LexicalHit, SentimentResult, analyze_sentiment, tokenize

__all__ = [
    # Per-comment
    "analyze_sentiment",
    "SentimentResult",
    "LexicalHit",
    "tokenize",
    # Labels
    "categorize_sentiment",
    "FINE_LABELS",
    "COARSE_LABELS",
    # Aggregate
    "analyze_comment",
    "analyze_multiple_comments",
    "CommentAnalysis",
    "SentimentSummary",
    # Themes
    "extract_themes",
    "ThemeSummary",
    "analyze_theme_frequency",
    "ThemeFrequency",
    # Length
    "analyze_length_patterns",
    "LengthPatterns",
    "LengthBucket",
]
