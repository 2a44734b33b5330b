"""Reliability and consensus analytics for evaluator feedback."""

from .corpus import Corpus, load_evaluations
from .expertise import classify_expertise
from .extractors.comments import extract_all_comments, extract_comments_from_evaluation
from .papers import find_multi_evaluator_papers, normalize_title
from .pipeline import AnalysisResult, run_analysis
from .reliability import (
    analyze_expert_consensus,
    analyze_expertise_preferences,
    calculate_fleiss_kappa,
    calculate_paper_intersection,
)
from .schema import DEFAULT_SCHEMA, ExtractionSchema
from .sentiment import analyze_sentiment, categorize_sentiment

__all__ = [
    "AnalysisResult",
    "Corpus",
    "DEFAULT_SCHEMA",
    "ExtractionSchema",
    "analyze_expert_consensus",
    "analyze_expertise_preferences",
    "analyze_sentiment",
    "calculate_fleiss_kappa",
    "calculate_paper_intersection",
    "categorize_sentiment",
    "classify_expertise",
    "extract_all_comments",
    "extract_comments_from_evaluation",
    "find_multi_evaluator_papers",
    "load_evaluations",
    "normalize_title",
    "run_analysis",
]
