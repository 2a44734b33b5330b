"""Tests for agreement, reliability and consensus metrics."""

import pytest

from raterlens.extractors.comments import extract_all_comments
from raterlens.extractors.grouping import group_comments_by_expertise
from raterlens.papers import PaperGroup, find_multi_evaluator_papers
from raterlens.reliability import (
    AnalysisUnit,
    analyze_expert_consensus,
    analyze_expertise_preferences,
    build_analysis_units,
    calculate_component_inter_rater,
    calculate_fleiss_kappa,
    calculate_paper_intersection,
    count_categories,
    dominant_category,
    interpret_kappa,
)


@pytest.fixture
def shared_paper(make_evaluation, make_user):
    """Factory: one paper, one evaluator per metadata block."""

    def _build(*blocks, title="Paper X"):
        evaluations = [
            make_evaluation(
                title=title,
                token=f"tok-{i}",
                user=make_user(email=f"r{i}@example.org"),
                metadata=block,
            )
            for i, block in enumerate(blocks)
        ]
        index = find_multi_evaluator_papers(extract_all_comments(evaluations), evaluations)
        return index.all_groups["paper x"]

    return _build


def title_note(text):
    return {"title": {"comments": text}}


class TestDominance:
    def test_count_categories(self):
        assert count_categories(["excellent", "terrible", "The value is 5", "great"]) == {
            "positive": 2,
            "neutral": 1,
            "negative": 1,
        }

    @pytest.mark.parametrize("counts,expected", [
        ({"positive": 2, "neutral": 1, "negative": 0}, "positive"),
        ({"positive": 1, "neutral": 0, "negative": 1}, "positive"),
        ({"positive": 0, "neutral": 1, "negative": 1}, "neutral"),
        ({"positive": 0, "neutral": 0, "negative": 3}, "negative"),
    ])
    def test_argmax_with_tie_order(self, counts, expected):
        assert dominant_category(counts) == expected

    @pytest.mark.parametrize("counts,expected", [
        ({"positive": 2, "neutral": 0, "negative": 1}, "positive"),
        ({"positive": 1, "neutral": 0, "negative": 1}, "neutral"),
        ({"positive": 0, "neutral": 0, "negative": 0}, "neutral"),
        ({"negative": 3}, "negative"),
    ])
    def test_strict_majority(self, counts, expected):
        assert dominant_category(counts, strict=True) == expected


class TestPaperIntersection:
    def test_disagreement(self, shared_paper):
        result = calculate_paper_intersection(shared_paper(title_note("excellent"), title_note("terrible")))
        assert result.has_intersection
        metadata = result.components["metadata"]
        assert metadata.agreement is False
        assert metadata.positive_count == 1
        assert metadata.negative_count == 1
        assert metadata.some_positive and metadata.some_negative
        assert metadata.dominant_if_agree is None
        assert metadata.category_counts() == {"positive": 1, "neutral": 0, "negative": 1}
        assert result.agreement_rate == 0
        assert "disagree on all 1 components" in result.interpretation

    def test_agreement(self, shared_paper):
        result = calculate_paper_intersection(shared_paper(title_note("excellent"), title_note("great")))
        metadata = result.components["metadata"]
        assert metadata.agreement
        assert metadata.all_positive
        assert metadata.dominant_if_agree == "positive"
        assert result.agreement_rate == 100
        assert "Complete agreement" in result.interpretation
        assert "positively" in result.interpretation

    def test_single_evaluator(self, shared_paper):
        result = calculate_paper_intersection(shared_paper(title_note("excellent")))
        assert result.has_intersection is False
        assert result.message == "Need at least 2 evaluators"
        assert result.components == {}

    def test_component_from_one_evaluator_skipped(self, make_evaluation, make_user):
        first = make_evaluation(
            title="Paper X", token="tok-0", user=make_user(email="r0@example.org"), metadata=title_note("excellent")
        )
        second = make_evaluation(title="Paper X", token="tok-1", user=make_user(email="r1@example.org"), metadata={})
        second["evaluationMetrics"]["overall"]["template"] = {"overallComments": "terrible"}
        evaluations = [first, second]
        group = find_multi_evaluator_papers(extract_all_comments(evaluations), evaluations).all_groups["paper x"]
        assert {c.component for c in group.comments} == {"metadata", "template"}
        result = calculate_paper_intersection(group)
        assert result.has_intersection
        assert result.components == {}
        assert result.agreement_rate == 0
        assert "No component" in result.interpretation

    def test_dominant_per_evaluator(self, shared_paper):
        group = shared_paper(
            {"title": {"comments": "excellent"}, "authors": {"comments": "great"}, "doi": {"comments": "wrong"}},
            title_note("good"),
        )
        metadata = calculate_paper_intersection(group).components["metadata"]
        assert metadata.evaluator_sentiments["r0@example.org"].counts["positive"] == 2
        assert metadata.agreement
        # r0 has one negative comment but a positive dominant
        assert metadata.negative_evaluators == {"r0@example.org"}

    def test_rejects_non_group(self):
        with pytest.raises(TypeError):
            calculate_paper_intersection({"paper_id": "x"})

    def test_empty_group(self):
        result = calculate_paper_intersection(PaperGroup(paper_id="x", title="X"))
        assert result.evaluator_count == 0
        assert not result.has_intersection


class TestFleissKappa:
    def test_perfect_agreement(self):
        units = [("positive",) * 3] * 3 + [("negative",) * 3] * 2
        result = calculate_fleiss_kappa(units)
        assert result.kappa == 1.0
        assert result.interpretation == "Almost perfect agreement"
        assert result.observed_agreement == 100
        assert result.expected_agreement == 52
        assert result.units == 5
        assert result.ratings == 15

    def test_single_category_everywhere(self):
        result = calculate_fleiss_kappa([["neutral", "neutral"], ["neutral", "neutral", "neutral"]])
        assert result.kappa == 1.0

    def test_total_disagreement(self):
        result = calculate_fleiss_kappa([["positive", "negative"], ["positive", "negative"]])
        assert result.kappa == -1.0
        assert result.interpretation == "Poor (worse than chance)"

    def test_variable_raters(self):
        result = calculate_fleiss_kappa([["positive"] * 3, ["positive", "negative"]])
        assert result.p_bar == pytest.approx(0.5)
        assert result.p_e == pytest.approx(0.68)
        assert result.kappa == pytest.approx(-0.5625, abs=1e-3)
        assert result.category_proportions["positive"] == pytest.approx(0.8)

    def test_analysis_units(self):
        units = [
            AnalysisUnit("p1", "metadata", ("positive", "positive")),
            AnalysisUnit("p2", "metadata", ("negative", "negative")),
        ]
        assert calculate_fleiss_kappa(units).kappa == 1.0

    def test_small_units_and_unknown_labels_skipped(self):
        result = calculate_fleiss_kappa([["positive"], ["positive", "bogus"], []])
        assert result.kappa is None
        assert result.interpretation == "Insufficient data"
        assert not result.is_sufficient
        assert result.formula == ""

    def test_empty(self):
        assert calculate_fleiss_kappa([]).interpretation == "Insufficient data"

    def test_formula(self):
        result = calculate_fleiss_kappa([["positive", "positive"], ["negative", "positive"]])
        assert result.formula.startswith("κ = (")
        assert result.formula.endswith(f"= {result.kappa:.3f}")

    @pytest.mark.parametrize("units", [None, "positive", 5, ["positive", "negative"]])
    def test_rejects_malformed(self, units):
        with pytest.raises(TypeError):
            calculate_fleiss_kappa(units)

    @pytest.mark.parametrize("kappa,label", [
        (-0.1, "Poor (worse than chance)"),
        (0.0, "Slight agreement"),
        (0.19, "Slight agreement"),
        (0.2, "Fair agreement"),
        (0.4, "Moderate agreement"),
        (0.6, "Substantial agreement"),
        (0.8, "Almost perfect agreement"),
        (1.0, "Almost perfect agreement"),
        (None, "Insufficient data"),
    ])
    def test_interpretation_bands(self, kappa, label):
        assert interpret_kappa(kappa) == label

    def test_build_units(self, shared_paper):
        group = shared_paper(title_note("excellent"), title_note("terrible"))
        units = build_analysis_units({group.paper_id: group})
        assert units == [AnalysisUnit("paper x", "metadata", ("positive", "negative"))]
        assert units[0].counts == {"positive": 1, "neutral": 0, "negative": 1}
        assert units[0].rater_count == 2

    def test_build_units_skips_single_evaluator(self, shared_paper):
        assert build_analysis_units([shared_paper(title_note("excellent"))]) == []


def expert_notes(make_comment, *notes, tier="expert", component="metadata"):
    """Comments from (evaluator, text) pairs."""
    return [
        make_comment(
            tier,
            id=f"c{i}",
            evaluator=evaluator,
            text=text,
            component=component,
            component_name=component.replace("_", " ").title(),
        )
        for i, (evaluator, text) in enumerate(notes)
    ]


class TestExpertConsensus:
    def test_unanimous_positive(self, make_comment):
        comments = expert_notes(make_comment, ("e1", "excellent"), ("e2", "great work"), ("e3", "good"))
        result = analyze_expert_consensus(comments)
        assert result.sufficient
        assert result.expert_count == 3
        [finding] = result.findings
        assert finding.consensus_type == "unanimous"
        assert finding.sentiment == "positive"
        assert finding.expert_count == 3
        assert finding.strength == "strong"
        assert finding.message == "All 3 experts praise metadata"
        assert result.positive_consensus == [finding]
        assert "consensus on strengths: Metadata" in result.interpretation

    def test_majority(self, make_comment):
        comments = expert_notes(make_comment, ("e1", "excellent"), ("e2", "great"), ("e3", "terrible"))
        [finding] = analyze_expert_consensus(comments).findings
        assert finding.consensus_type == "majority"
        assert finding.sentiment == "positive"
        assert finding.expert_count == 2
        assert finding.strength == "moderate"
        assert finding.message == "Majority (2) of 3 experts favor metadata"

    def test_split_has_no_consensus(self, make_comment):
        comments = expert_notes(make_comment, ("e1", "excellent"), ("e2", "terrible"), ("e2", "awful"))
        result = analyze_expert_consensus(comments)
        assert result.sufficient
        assert not result.has_consensus
        assert "vary" in result.interpretation

    def test_mixed_evaluator_leans_neutral(self, make_comment):
        comments = expert_notes(
            make_comment, ("e1", "excellent"), ("e1", "terrible"), ("e2", "The value is 5")
        )
        [finding] = analyze_expert_consensus(comments).findings
        assert finding.consensus_type == "unanimous"
        assert finding.sentiment == "neutral"

    def test_single_expert_component_skipped(self, make_comment):
        comments = expert_notes(make_comment, ("e1", "excellent"), ("e1", "great"), ("e1", "good"))
        result = analyze_expert_consensus(comments)
        assert result.sufficient
        assert result.findings == []
        assert result.components["metadata"].expert_count == 1

    def test_insufficient(self, make_comment):
        result = analyze_expert_consensus(expert_notes(make_comment, ("e1", "excellent"), ("e2", "great")))
        assert not result.sufficient
        assert result.message == "Insufficient expert feedback for consensus analysis"
        assert result.findings == []

    def test_lower_tiers_ignored(self, make_comment):
        comments = expert_notes(make_comment, ("b1", "excellent"), ("b2", "great"), ("b3", "good"), tier="basic")
        assert not analyze_expert_consensus(comments).sufficient

    def test_advanced_tier_counts(self, make_comment):
        comments = [
            *expert_notes(make_comment, ("e1", "terrible")),
            *expert_notes(make_comment, ("a1", "awful"), ("a2", "wrong"), tier="advanced"),
        ]
        result = analyze_expert_consensus(comments)
        assert [f.sentiment for f in result.negative_consensus] == ["negative"]

    def test_prefers_breakdown(self, make_comment):
        comments = expert_notes(make_comment, ("e1", "excellent"), ("e2", "great"), ("e3", "good"))
        result = analyze_expert_consensus(None, by_expertise=group_comments_by_expertise(comments))
        assert result.has_consensus

    def test_rejects_string(self):
        with pytest.raises(TypeError):
            analyze_expert_consensus("excellent")


class TestExpertisePreferences:
    def comments(self, make_comment):
        return [
            *expert_notes(make_comment, ("e1", "excellent"), ("e2", "great")),
            *expert_notes(make_comment, ("e1", "terrible"), component="content"),
            *expert_notes(make_comment, ("b1", "good"), tier="basic"),
            *expert_notes(make_comment, ("b1", "excellent"), tier="basic", component="content"),
            *expert_notes(make_comment, ("b1", "wrong"), tier="basic", component="innovation"),
        ]

    def test_preferences_per_tier(self, make_comment):
        result = analyze_expertise_preferences(self.comments(make_comment))
        assert list(result.preferences) == ["expert", "basic"]
        expert = result.preferences["expert"]
        assert expert.total_comments == 3
        assert expert.favorite[0] == "metadata"
        assert expert.concern[0] == "content"
        assert expert.by_component["content"].net_score == -1.0

    def test_cross_tier_zones(self, make_comment):
        cross = analyze_expertise_preferences(self.comments(make_comment)).cross_tier
        assert cross.agreement_zone == ["metadata"]
        assert cross.divergence_zone == ["content"]
        assert cross.agreement_rate == 50
        # innovation only has basic-tier comments
        assert cross.components["innovation"].tiers_with_data == 1

    def test_interpretation(self, make_comment):
        text = analyze_expertise_preferences(self.comments(make_comment)).interpretation
        assert "Domain experts favor Metadata (100% positive)" in text
        assert "concern about Content (100% negative)" in text
        assert "Basic evaluators agree with experts, favoring Metadata" in text

    def test_single_tier_has_no_cross_tier(self, make_comment):
        result = analyze_expertise_preferences(expert_notes(make_comment, ("e1", "excellent")))
        assert result.cross_tier is None

    def test_accepts_breakdown(self, make_comment):
        breakdown = group_comments_by_expertise(self.comments(make_comment))
        assert analyze_expertise_preferences(breakdown).cross_tier is not None

    def test_empty(self):
        result = analyze_expertise_preferences([])
        assert result.preferences == {}
        assert result.interpretation == "Insufficient data for expertise comparison."

    def test_rejects_none(self):
        with pytest.raises(TypeError):
            analyze_expertise_preferences(None)


class TestComponentInterRater:
    def test_agreement_rate(self, make_comment):
        comments = [
            make_comment(id="1", evaluator="a", paper_title="Paper A", text="excellent"),
            make_comment(id="2", evaluator="b", paper_title="paper  a", text="great"),
            make_comment(id="3", evaluator="a", paper_title="Paper B", text="excellent"),
            make_comment(id="4", evaluator="b", paper_title="Paper B", text="terrible"),
        ]
        metadata = calculate_component_inter_rater(comments)["metadata"]
        assert metadata.has_inter_rater
        assert metadata.papers_analyzed == 2
        assert metadata.agreement_count == 1
        assert metadata.agreement_rate == 50

    def test_single_rater_papers_excluded(self, make_comment):
        comments = [
            make_comment(id="1", evaluator="a", paper_title="Paper A"),
            make_comment(id="2", evaluator="b", paper_title="Paper B"),
        ]
        metadata = calculate_component_inter_rater(comments)["metadata"]
        assert not metadata.has_inter_rater
        assert metadata.agreement_rate == 0

    def test_falls_back_to_paper_id(self, make_comment):
        comments = [
            make_comment(id="1", evaluator="a", paper_title=None, paper_id="10.1/x"),
            make_comment(id="2", evaluator="b", paper_title=None, paper_id="10.1/x"),
        ]
        assert calculate_component_inter_rater(comments)["metadata"].papers_analyzed == 1

    def test_rejects_none(self):
        with pytest.raises(TypeError):
            calculate_component_inter_rater(None)
