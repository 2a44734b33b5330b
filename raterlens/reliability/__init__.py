"""Reliability and consensus metrics over multi-evaluator feedback.

Every metric here buckets comments with the same sentiment function and
picks dominants with the same tie-break rule (see ``dominance``), and
every metric returns an explicit insufficient-data result instead of
raising when there are too few raters.

This module provides:
- Component intersection per paper
- Fleiss' Kappa over (paper, component) units
- Expert consensus detection
- Expertise-tier preferences and cross-tier agreement
- Per-component inter-rater agreement
"""

from .consensus import ConsensusFinding, ExpertConsensus, analyze_expert_consensus
from .dominance import comment_category, count_categories, dominant_category
from .inter_rater import ComponentInterRater, calculate_component_inter_rater
from .intersection import ComponentIntersection, PaperIntersection, calculate_paper_intersection
from .kappa import AnalysisUnit, KappaResult, build_analysis_units, calculate_fleiss_kappa, interpret_kappa
from .tiers import CrossTierAgreement, ExpertisePreferences, analyze_expertise_preferences

__all__ = [
    # Shared rules
    "comment_category",
    "count_categories",
    "dominant_category",
    # Intersection
    "calculate_paper_intersection",
    "PaperIntersection",
    "ComponentIntersection",
    # Kappa
    "calculate_fleiss_kappa",
    "build_analysis_units",
    "interpret_kappa",
    "AnalysisUnit",
    "KappaResult",
    # Consensus
    "analyze_expert_consensus",
    "ExpertConsensus",
    "ConsensusFinding",
    # Tiers
    "analyze_expertise_preferences",
    "ExpertisePreferences",
    "CrossTierAgreement",
    # Inter-rater
    "calculate_component_inter_rater",
    "ComponentInterRater",
]
