"""One analysis pass: corpus in, every metric out."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .corpus import Corpus
from .extractors.comments import extract_all_comments
from .extractors.grouping import (
    CommentStatistics,
    ExpertiseBreakdown,
    comment_statistics,
    group_comments_by_component,
    group_comments_by_expertise,
)
from .models import Comment
from .papers import PaperIndex, find_multi_evaluator_papers
from .reliability import (
    AnalysisUnit,
    ComponentInterRater,
    ExpertConsensus,
    ExpertisePreferences,
    KappaResult,
    PaperIntersection,
    analyze_expert_consensus,
    analyze_expertise_preferences,
    build_analysis_units,
    calculate_component_inter_rater,
    calculate_fleiss_kappa,
    calculate_paper_intersection,
)
from .schema import DEFAULT_SCHEMA, ExtractionSchema
from .sentiment import (
    LengthPatterns,
    SentimentSummary,
    ThemeFrequency,
    ThemeSummary,
    analyze_length_patterns,
    analyze_multiple_comments,
    analyze_theme_frequency,
    extract_themes,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    evaluation_count: int
    comments: tuple[Comment, ...]
    statistics: CommentStatistics
    papers: PaperIndex
    intersections: dict[str, PaperIntersection]
    units: tuple[AnalysisUnit, ...]
    kappa: KappaResult
    by_expertise: ExpertiseBreakdown
    expert_consensus: ExpertConsensus
    expertise: ExpertisePreferences
    component_inter_rater: dict[str, ComponentInterRater]
    sentiment: SentimentSummary
    component_sentiment: dict[str, SentimentSummary]
    themes: ThemeSummary
    theme_frequency: dict[str, ThemeFrequency]
    length_patterns: LengthPatterns


def run_analysis(corpus: Corpus | Iterable[Any], schema: ExtractionSchema | None = None) -> AnalysisResult:
    """Run extraction, grouping and every reliability metric over a corpus.

    Args:
        corpus: A Corpus snapshot, or evaluation records to snapshot.
        schema: Extraction schema; defaults to DEFAULT_SCHEMA. No schema file
            is read here, callers load one explicitly.

    Returns:
        AnalysisResult. Nothing is cached between calls.
    """
    if not isinstance(corpus, Corpus):
        corpus = Corpus.from_records(corpus)
    if schema is None:
        schema = DEFAULT_SCHEMA

    evaluations = list(corpus.evaluations)
    comments = extract_all_comments(evaluations, schema)
    papers = find_multi_evaluator_papers(comments, evaluations, schema)
    intersections = {
        paper_id: calculate_paper_intersection(group)
        for paper_id, group in papers.multi_evaluator_papers.items()
    }
    units = build_analysis_units(papers.multi_evaluator_papers)
    kappa = calculate_fleiss_kappa(units)
    by_expertise = group_comments_by_expertise(comments)
    themes = extract_themes(comments)

    logger.info(f"Kappa over {kappa.units} units: {kappa.kappa} ({kappa.interpretation})")

    return AnalysisResult(
        evaluation_count=len(evaluations),
        comments=tuple(comments),
        statistics=comment_statistics(comments),
        papers=papers,
        intersections=intersections,
        units=tuple(units),
        kappa=kappa,
        by_expertise=by_expertise,
        expert_consensus=analyze_expert_consensus(comments, by_expertise),
        expertise=analyze_expertise_preferences(by_expertise),
        component_inter_rater=calculate_component_inter_rater(comments),
        sentiment=analyze_multiple_comments(comments),
        component_sentiment={
            component: analyze_multiple_comments(component_comments)
            for component, component_comments in group_comments_by_component(comments).items()
        },
        themes=themes,
        theme_frequency=analyze_theme_frequency(themes),
        length_patterns=analyze_length_patterns(comments),
    )
