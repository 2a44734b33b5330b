"""Aggregate sentiment and theme analysis over many comments."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..models import Comment
from .categories import (
    FINE_LABELS,
    NEGATIVE,
    NEUTRAL,
    POSITIVE,
    SLIGHTLY_NEGATIVE,
    SLIGHTLY_POSITIVE,
    categorize_sentiment,
)
from .classifier import SentimentResult, analyze_sentiment
from .lexicon import THEME_KEYWORDS

TOP_WORDS = 10


def _text_of(comment: Comment | str | None) -> str:
    if isinstance(comment, Comment):
        return comment.text
    return comment if isinstance(comment, str) else ""


@dataclass
class CommentAnalysis:
    """Analysis of a single comment."""

    comment: Comment | str
    sentiment: SentimentResult

    @property
    def coarse(self) -> str:
        return categorize_sentiment(self.sentiment.category)


@dataclass
class SentimentSummary:
    """Aggregate sentiment across a set of comments."""

    total: int = 0
    analyzed: int = 0
    counts: dict[str, int] = field(default_factory=lambda: dict.fromkeys(FINE_LABELS, 0))
    average_score: float = 0.5
    average_confidence: float = 0.0
    top_positive_words: list[tuple[str, int]] = field(default_factory=list)
    top_negative_words: list[tuple[str, int]] = field(default_factory=list)
    results: list[CommentAnalysis] = field(default_factory=list)

    @property
    def empty(self) -> int:
        return self.total - self.analyzed

    @property
    def simple_counts(self) -> dict[str, int]:
        """Counts collapsed to positive / neutral / negative."""
        return {
            POSITIVE: self.counts[POSITIVE] + self.counts[SLIGHTLY_POSITIVE],
            NEUTRAL: self.counts[NEUTRAL],
            NEGATIVE: self.counts[NEGATIVE] + self.counts[SLIGHTLY_NEGATIVE],
        }

    @property
    def overall_sentiment(self) -> str:
        if not self.analyzed:
            return NEUTRAL
        simple = self.simple_counts
        positive_ratio = simple[POSITIVE] / self.analyzed
        negative_ratio = simple[NEGATIVE] / self.analyzed
        if positive_ratio > 0.6:
            return POSITIVE
        if negative_ratio > 0.6:
            return NEGATIVE
        if positive_ratio > negative_ratio + 0.2:
            return SLIGHTLY_POSITIVE
        if negative_ratio > positive_ratio + 0.2:
            return SLIGHTLY_NEGATIVE
        return NEUTRAL

    def ratio(self, coarse: str) -> float:
        """Share of analyzed comments in a coarse category."""
        if not self.analyzed:
            return 0.0
        return self.simple_counts[coarse] / self.analyzed


def analyze_comment(comment: Comment | str) -> CommentAnalysis:
    """Analyze a single comment."""
    return CommentAnalysis(comment=comment, sentiment=analyze_sentiment(_text_of(comment)))


def analyze_multiple_comments(comments: Iterable[Comment | str]) -> SentimentSummary:
    """Score every non-empty comment and aggregate the results."""
    comments = list(comments)
    summary = SentimentSummary(total=len(comments))

    positive_words: Counter[str] = Counter()
    negative_words: Counter[str] = Counter()
    score_sum = 0.0
    confidence_sum = 0.0

    for comment in comments:
        if not _text_of(comment).strip():
            continue
        analysis = analyze_comment(comment)
        summary.results.append(analysis)
        summary.counts[analysis.sentiment.category] += 1
        score_sum += analysis.sentiment.normalized_score
        confidence_sum += analysis.sentiment.confidence
        positive_words.update(h.word for h in analysis.sentiment.positive_words)
        negative_words.update(h.word for h in analysis.sentiment.negative_words)

    summary.analyzed = len(summary.results)
    if summary.analyzed:
        summary.average_score = score_sum / summary.analyzed
        summary.average_confidence = confidence_sum / summary.analyzed
    summary.top_positive_words = positive_words.most_common(TOP_WORDS)
    summary.top_negative_words = negative_words.most_common(TOP_WORDS)
    return summary


@dataclass
class ThemeSummary:
    """Keyword theme counts across comments."""

    total: int
    counts: dict[str, int]
    comments: dict[str, list[Comment | str]]

    @property
    def ranked(self) -> list[tuple[str, int, float]]:
        """(theme, count, percent of all comments), most frequent first."""
        ordered = sorted(self.counts.items(), key=lambda item: item[1], reverse=True)
        return [
            (theme, count, 100.0 * count / self.total if self.total else 0.0)
            for theme, count in ordered
        ]


def extract_themes(comments: Iterable[Comment | str]) -> ThemeSummary:
    """Tag comments with the fixed themes whose keywords they mention."""
    comments = list(comments)
    counts = dict.fromkeys(THEME_KEYWORDS, 0)
    tagged: dict[str, list[Comment | str]] = {theme: [] for theme in THEME_KEYWORDS}

    for comment in comments:
        text = _text_of(comment).lower()
        if not text:
            continue
        for theme, keywords in THEME_KEYWORDS.items():
            if any(keyword in text for keyword in keywords):
                counts[theme] += 1
                tagged[theme].append(comment)

    return ThemeSummary(total=len(comments), counts=counts, comments=tagged)


# key, label, min words, max words (None for no upper bound)
LENGTH_BUCKETS = (
    ("brief", "Brief (1-10 words)", 1, 10),
    ("moderate", "Moderate (11-30 words)", 11, 30),
    ("detailed", "Detailed (31-60 words)", 31, 60),
    ("extensive", "Extensive (60+ words)", 61, None),
)
MIN_BUCKET_INSIGHT = 3
LENGTH_RATIO_MARGIN = 0.15


def _coarse_counts() -> dict[str, int]:
    return dict.fromkeys((POSITIVE, NEUTRAL, NEGATIVE), 0)


@dataclass
class LengthBucket:
    """Comments whose word count falls in one length range."""

    key: str
    label: str
    sentiments: dict[str, int] = field(default_factory=_coarse_counts)
    by_component: dict[str, dict[str, int]] = field(default_factory=dict)
    component_names: dict[str, str] = field(default_factory=dict)
    by_tier: dict[str, dict[str, int]] = field(default_factory=dict)
    score_sum: float = 0.0

    @property
    def total(self) -> int:
        return sum(self.sentiments.values())

    @property
    def average_score(self) -> float:
        return self.score_sum / self.total if self.total else 0.0

    def ratio(self, coarse: str) -> float:
        return self.sentiments[coarse] / self.total if self.total else 0.0


@dataclass
class LengthPatterns:
    buckets: dict[str, LengthBucket]
    insights: list[str]

    def most(self, coarse: str) -> LengthBucket | None:
        """Bucket with the highest share of a coarse category, among those large enough to compare."""
        best = None
        for bucket in self.buckets.values():
            if bucket.total < MIN_BUCKET_INSIGHT:
                continue
            if best is None or bucket.ratio(coarse) > best.ratio(coarse):
                best = bucket
        return best


def _bucket_key(word_count: int) -> str | None:
    for key, _, low, high in LENGTH_BUCKETS:
        if word_count >= low and (high is None or word_count <= high):
            return key
    return None


def analyze_length_patterns(comments: Iterable[Comment | str]) -> LengthPatterns:
    """Sentiment by comment length.

    Word count is the number of whitespace-separated tokens. Comments with
    no words fall in no bucket. Plain strings have no component or tier,
    so they only count toward the sentiment totals.
    """
    buckets = {key: LengthBucket(key=key, label=label) for key, label, _, _ in LENGTH_BUCKETS}

    for comment in comments:
        text = _text_of(comment)
        key = _bucket_key(len(text.split()))
        if key is None:
            continue
        bucket = buckets[key]
        sentiment = analyze_sentiment(text)
        coarse = categorize_sentiment(sentiment.category)
        bucket.sentiments[coarse] += 1
        bucket.score_sum += sentiment.normalized_score

        if isinstance(comment, Comment):
            component = bucket.by_component.setdefault(comment.component, {**_coarse_counts(), "total": 0})
            component[coarse] += 1
            component["total"] += 1
            bucket.component_names[comment.component] = comment.component_name
            tier = bucket.by_tier.setdefault(comment.tier, {**_coarse_counts(), "total": 0})
            tier[coarse] += 1
            tier["total"] += 1

    patterns = LengthPatterns(buckets=buckets, insights=[])

    most_positive = patterns.most(POSITIVE)
    most_negative = patterns.most(NEGATIVE)
    if most_positive is not None:
        patterns.insights.append(
            f"{most_positive.label} comments show highest positive sentiment "
            f"({most_positive.ratio(POSITIVE):.0%} of n={most_positive.total})."
        )
    if most_negative is not None and most_negative is not most_positive and most_negative.ratio(NEGATIVE):
        patterns.insights.append(
            f"{most_negative.label} comments contain most critical feedback "
            f"({most_negative.ratio(NEGATIVE):.0%})."
        )

    brief, detailed = buckets["brief"], buckets["detailed"]
    if brief.total >= MIN_BUCKET_INSIGHT and detailed.total >= MIN_BUCKET_INSIGHT:
        if detailed.ratio(POSITIVE) > brief.ratio(POSITIVE) + LENGTH_RATIO_MARGIN:
            patterns.insights.append(
                "Detailed comments tend to be more positive; evaluators who elaborate are more satisfied."
            )
        elif brief.ratio(POSITIVE) > detailed.ratio(POSITIVE) + LENGTH_RATIO_MARGIN:
            patterns.insights.append(
                "Brief comments are more positive; detailed feedback often contains constructive criticism."
            )
        else:
            patterns.insights.append("Sentiment is consistent across comment lengths.")

    return patterns


@dataclass
class ThemeFrequency:
    theme: str
    count: int
    percentage: float
    sentiments: dict[str, int]
    components: list[tuple[str, str, int]]  # (key, name, count), most comments first


def analyze_theme_frequency(themes: ThemeSummary) -> dict[str, ThemeFrequency]:
    """Sentiment and component spread of each theme that occurs, most frequent first."""
    frequency = {}
    for theme, count, pct in themes.ranked:
        if not count:
            continue
        sentiments = _coarse_counts()
        components: Counter[str] = Counter()
        names: dict[str, str] = {}
        for comment in themes.comments[theme]:
            sentiments[categorize_sentiment(analyze_sentiment(_text_of(comment)).category)] += 1
            if isinstance(comment, Comment):
                components[comment.component] += 1
                names[comment.component] = comment.component_name
        frequency[theme] = ThemeFrequency(
            theme=theme,
            count=count,
            percentage=pct,
            sentiments=sentiments,
            components=[(key, names[key], n) for key, n in components.most_common()],
        )
    return frequency
