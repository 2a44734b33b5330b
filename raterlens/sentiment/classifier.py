"""Keyword-based sentiment for evaluator feedback.

A fixed lexicon with intensity modifiers and negation handling. It is
deliberately simple: the same text always gets the same score, so
agreement numbers built on top of it are reproducible.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .categories import NEUTRAL, label_for_score
from .lexicon import (
    INTENSIFIERS,
    NEGATION_FACTOR,
    NEGATION_WINDOW,
    NEGATIONS,
    NEGATIVE_PHRASES,
    NEGATIVE_WORDS,
    POSITIVE_PHRASES,
    POSITIVE_WORDS,
)

_STRIP = re.compile(r"[^\w\s'-]")


@dataclass
class LexicalHit:
    """A lexicon match and its contribution after modifiers."""

    word: str
    score: float


@dataclass
class SentimentResult:
    """Sentiment of a piece of text."""

    score: float  # sum of signed hits
    normalized_score: float  # 0.0 to 1.0, 0.5 is neutral
    category: str  # one of the five fine labels
    confidence: float  # 0.0 to 1.0
    positive_words: list[LexicalHit] = field(default_factory=list)
    negative_words: list[LexicalHit] = field(default_factory=list)
    word_count: int = 0
    is_empty: bool = False

    @property
    def match_count(self) -> int:
        return len(self.positive_words) + len(self.negative_words)


def tokenize(text: str) -> list[str]:
    """Lowercase, drop punctuation except internal apostrophes and hyphens, split.

    Quote marks and dashes wrapping a word are stripped, so "'excellent'"
    and "-wrong-" match the lexicon. Tokens left empty are dropped.
    """
    tokens = (token.strip("'-") for token in _STRIP.sub(" ", text.lower()).split())
    return [token for token in tokens if token]


def _is_negated(tokens: list[str], index: int) -> bool:
    for token in tokens[max(0, index - NEGATION_WINDOW):index]:
        if token in NEGATIONS or token.endswith("n't"):
            return True
    return False


def _intensity(tokens: list[str], index: int) -> float:
    if index == 0:
        return 1.0
    return INTENSIFIERS.get(tokens[index - 1], 1.0)


def _phrase_hits(tokens: list[str]) -> list[LexicalHit]:
    padded = f" {' '.join(tokens)} "
    hits = [LexicalHit(p, POSITIVE_WORDS[p]) for p in POSITIVE_PHRASES if f" {p} " in padded]
    hits += [LexicalHit(p, NEGATIVE_WORDS[p]) for p in NEGATIVE_PHRASES if f" {p} " in padded]
    return hits


def _token_hits(tokens: list[str]) -> list[LexicalHit]:
    hits = []
    for index, token in enumerate(tokens):
        score = POSITIVE_WORDS.get(token) or NEGATIVE_WORDS.get(token)
        if not score:
            continue
        word = token
        score *= _intensity(tokens, index)
        if _is_negated(tokens, index):
            score *= NEGATION_FACTOR
            word = f"not {token}"
        hits.append(LexicalHit(word, score))
    return hits


def _empty_result() -> SentimentResult:
    return SentimentResult(
        score=0.0,
        normalized_score=0.5,
        category=NEUTRAL,
        confidence=0.0,
        is_empty=True,
    )


def analyze_sentiment(text: str | None) -> SentimentResult:
    """Score a comment.

    Args:
        text: The comment text. None is treated as empty.

    Returns:
        SentimentResult with signed score, normalized score, fine label
        and a confidence based on how much of the text hit the lexicon.

    Raises:
        TypeError: If text is neither a string nor None.
    """
    if text is None:
        return _empty_result()
    if not isinstance(text, str):
        raise TypeError(f"analyze_sentiment expects str, got {type(text).__name__}")
    if not text.strip():
        return _empty_result()

    tokens = tokenize(text)
    hits = _phrase_hits(tokens) + _token_hits(tokens)

    total = sum(h.score for h in hits)
    if hits:
        normalized = max(0.0, min(1.0, (total / len(hits) + 1) / 2))
    else:
        normalized = 0.5

    return SentimentResult(
        score=total,
        normalized_score=normalized,
        category=label_for_score(normalized),
        confidence=min(1.0, 2 * len(hits) / max(len(tokens), 1)),
        positive_words=[h for h in hits if h.score > 0],
        negative_words=[h for h in hits if h.score < 0],
        word_count=len(tokens),
    )
