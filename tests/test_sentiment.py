"""Tests for the sentiment classifier, labels and aggregation."""

import pytest

from raterlens.sentiment import (
    COARSE_LABELS,
    FINE_LABELS,
    analyze_length_patterns,
    analyze_multiple_comments,
    analyze_sentiment,
    analyze_theme_frequency,
    categorize_sentiment,
    extract_themes,
    tokenize,
)
from raterlens.sentiment.categories import label_for_score


class TestTokenize:
    def test_lowercases_and_strips_punctuation(self):
        assert tokenize("Excellent, GREAT work!!!") == ["excellent", "great", "work"]

    def test_keeps_apostrophes_and_hyphens(self):
        assert tokenize("doesn't look well-written") == ["doesn't", "look", "well-written"]

    def test_strips_wrapping_quotes_and_dashes(self):
        assert tokenize("'excellent' -wrong- -- '") == ["excellent", "wrong"]

    def test_wrapped_words_are_scored(self):
        assert analyze_sentiment("The title was 'excellent'").category == "positive"
        assert analyze_sentiment("-wrong- title").category == "negative"


class TestAnalyzeSentiment:
    """Test lexicon scoring with intensifiers and negation."""

    def test_positive(self):
        result = analyze_sentiment("The title is good")
        assert result.category == "positive"
        assert result.normalized_score == pytest.approx(0.85)
        assert [h.word for h in result.positive_words] == ["good"]

    def test_negative(self):
        result = analyze_sentiment("terrible extraction, wrong title")
        assert result.category == "negative"
        assert result.score < 0
        assert len(result.negative_words) == 2

    def test_empty_text(self):
        result = analyze_sentiment("")
        assert result.category == "neutral"
        assert result.normalized_score == 0.5
        assert result.confidence == 0
        assert result.is_empty

    def test_whitespace_text(self):
        result = analyze_sentiment("   \n\t ")
        assert result.is_empty
        assert result.category == "neutral"

    def test_none_is_empty(self):
        assert analyze_sentiment(None).is_empty

    def test_non_string_raises(self):
        with pytest.raises(TypeError, match="expects str"):
            analyze_sentiment(42)

    def test_no_lexicon_hits_is_neutral(self):
        result = analyze_sentiment("The variable is set to 5.")
        assert result.category == "neutral"
        assert result.normalized_score == 0.5
        assert result.confidence == 0
        assert not result.is_empty

    def test_negation_inverts(self):
        assert analyze_sentiment("not good").normalized_score < analyze_sentiment("good").normalized_score

    def test_negated_hit_is_labelled(self):
        result = analyze_sentiment("not good")
        assert [h.word for h in result.negative_words] == ["not good"]
        assert result.negative_words[0].score == pytest.approx(-0.56)

    def test_contraction_negates(self):
        result = analyze_sentiment("it doesn't work well")
        assert result.category == "negative"

    def test_negation_window_is_three_tokens(self):
        result = analyze_sentiment("not that this is really good")
        # "not" is four tokens before "good"
        assert result.positive_words

    def test_intensity_monotonic(self):
        assert analyze_sentiment("very good").normalized_score >= analyze_sentiment("good").normalized_score

    def test_diminisher_weakens(self):
        assert analyze_sentiment("slightly good").normalized_score < analyze_sentiment("good").normalized_score

    def test_phrase_matched(self):
        result = analyze_sentiment("This is completely wrong")
        assert "completely wrong" in [h.word for h in result.negative_words]
        assert result.category == "negative"

    def test_phrase_needs_token_boundary(self):
        result = analyze_sentiment("notideal")
        assert result.match_count == 0

    def test_slightly_negative(self):
        assert analyze_sentiment("a slight delay").category == "slightly_negative"

    def test_confidence(self):
        # one hit in four tokens
        assert analyze_sentiment("the title is good").confidence == pytest.approx(0.5)
        assert analyze_sentiment("good").confidence == 1.0

    @pytest.mark.parametrize("text", [
        "excellent excellent excellent",
        "very very extremely perfect",
        "terrible awful horrible useless",
        "not not not bad",
        "completely wrong and totally incorrect",
        "a mixed bag: good but slow",
    ])
    def test_score_bounded(self, text):
        result = analyze_sentiment(text)
        assert 0.0 <= result.normalized_score <= 1.0
        assert 0.0 <= result.confidence <= 1.0

    def test_deterministic(self):
        text = "Accurate authors but the venue is missing"
        assert analyze_sentiment(text) == analyze_sentiment(text)


class TestCategories:
    def test_thresholds(self):
        assert label_for_score(0.65) == "positive"
        assert label_for_score(0.6) == "slightly_positive"
        assert label_for_score(0.5) == "neutral"
        assert label_for_score(0.4) == "slightly_negative"
        assert label_for_score(0.35) == "negative"

    def test_five_labels_collapse_to_three(self):
        assert {categorize_sentiment(label) for label in FINE_LABELS} == set(COARSE_LABELS)

    def test_collapse_mapping(self):
        assert categorize_sentiment("slightly_positive") == "positive"
        assert categorize_sentiment("slightly_negative") == "negative"
        assert categorize_sentiment("neutral") == "neutral"

    def test_idempotent(self):
        for label in FINE_LABELS:
            once = categorize_sentiment(label)
            assert categorize_sentiment(once) == once

    @pytest.mark.parametrize("label", ["", "great", None, 3, "POSITIVE"])
    def test_total(self, label):
        assert categorize_sentiment(label) == "neutral"


class TestAggregate:
    def test_counts(self):
        summary = analyze_multiple_comments(["Excellent work", "terrible", "", "The value is 5"])
        assert summary.total == 4
        assert summary.analyzed == 3
        assert summary.empty == 1
        assert summary.simple_counts == {"positive": 1, "neutral": 1, "negative": 1}
        assert summary.overall_sentiment == "neutral"

    def test_top_words(self):
        summary = analyze_multiple_comments(["good", "good and accurate", "wrong"])
        assert summary.top_positive_words[0] == ("good", 2)
        assert summary.top_negative_words == [("wrong", 1)]

    def test_overall_positive(self):
        summary = analyze_multiple_comments(["good", "great", "excellent", "fine"])
        assert summary.overall_sentiment == "positive"

    def test_empty_input(self):
        summary = analyze_multiple_comments([])
        assert summary.analyzed == 0
        assert summary.average_score == 0.5
        assert summary.ratio("positive") == 0.0

    def test_accepts_comments(self, make_comment):
        summary = analyze_multiple_comments([make_comment(text="excellent"), make_comment(text="awful")])
        assert summary.simple_counts["positive"] == 1
        assert summary.simple_counts["negative"] == 1


class TestThemes:
    def test_counts_and_ranking(self):
        themes = extract_themes(["The title is accurate", "Too slow to load", "accurate but slow"])
        assert themes.counts["Accuracy"] == 2
        assert themes.counts["Performance"] == 2
        top = themes.ranked[:2]
        assert {theme for theme, _, _ in top} == {"Accuracy", "Performance"}
        assert top[0][2] == pytest.approx(200 / 3)

    def test_no_comments(self):
        themes = extract_themes([])
        assert all(count == 0 for count in themes.counts.values())
        assert all(pct == 0.0 for _, _, pct in themes.ranked)


def words(n: int, word: str = "x") -> str:
    return " ".join([word] * n)


class TestLengthPatterns:
    @pytest.mark.parametrize(
        "count,bucket",
        [(1, "brief"), (10, "brief"), (11, "moderate"), (30, "moderate"),
         (31, "detailed"), (60, "detailed"), (61, "extensive")],
    )
    def test_bucket_boundaries(self, count, bucket):
        patterns = analyze_length_patterns([words(count)])
        assert patterns.buckets[bucket].total == 1
        assert sum(b.total for b in patterns.buckets.values()) == 1

    def test_empty_text_has_no_bucket(self):
        patterns = analyze_length_patterns(["", "   "])
        assert all(b.total == 0 for b in patterns.buckets.values())
        assert patterns.insights == []

    def test_breakdowns(self, make_comment):
        patterns = analyze_length_patterns([
            make_comment(text="excellent title"),
            make_comment("basic", id="c2", text="awful title"),
        ])
        brief = patterns.buckets["brief"]
        assert brief.sentiments == {"positive": 1, "neutral": 0, "negative": 1}
        assert brief.by_component["metadata"] == {"positive": 1, "neutral": 0, "negative": 1, "total": 2}
        assert brief.component_names == {"metadata": "Metadata"}
        assert brief.by_tier["basic"]["negative"] == 1
        assert 0.0 < brief.average_score < 1.0

    def test_too_few_for_insights(self):
        assert analyze_length_patterns(["good", "great"]).insights == []

    def test_brief_more_positive(self):
        patterns = analyze_length_patterns(["good", "great work", "excellent", *[words(35, "awful")] * 3])
        assert patterns.insights == [
            "Brief (1-10 words) comments show highest positive sentiment (100% of n=3).",
            "Detailed (31-60 words) comments contain most critical feedback (100%).",
            "Brief comments are more positive; detailed feedback often contains constructive criticism.",
        ]

    def test_consistent_lengths(self):
        patterns = analyze_length_patterns(["good", "great work", "excellent", *[words(40, "good")] * 3])
        assert patterns.insights == [
            "Brief (1-10 words) comments show highest positive sentiment (100% of n=3).",
            "Sentiment is consistent across comment lengths.",
        ]


class TestThemeFrequency:
    def test_sentiment_and_components(self, make_comment):
        themes = extract_themes([
            make_comment(text="accurate title"),
            make_comment(id="c2", component="content", component_name="Content", text="wrong section"),
            make_comment(id="c3", component="content", component_name="Content", text="incorrect table"),
        ])
        frequency = analyze_theme_frequency(themes)
        accuracy = frequency["Accuracy"]
        assert accuracy.count == 3
        assert accuracy.percentage == pytest.approx(100.0)
        assert accuracy.sentiments == {"positive": 1, "neutral": 0, "negative": 2}
        assert accuracy.components == [("content", "Content", 2), ("metadata", "Metadata", 1)]

    def test_only_occurring_themes_in_rank_order(self):
        frequency = analyze_theme_frequency(extract_themes(["too slow", "slow and wrong", "fast"]))
        assert list(frequency) == ["Performance", "Accuracy"]
        assert frequency["Performance"].components == []

    def test_no_themes(self):
        assert analyze_theme_frequency(extract_themes([])) == {}
