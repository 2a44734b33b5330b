"""Fleiss' Kappa over (paper, component) analysis units.

Each unit carries the dominant sentiment of every evaluator who commented
on that component of that paper. Units may have different rater counts.
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from .. import config
from ..papers import PaperGroup
from ..sentiment import COARSE_LABELS
from .intersection import calculate_paper_intersection

INSUFFICIENT_DATA = "Insufficient data"

# (upper bound, label), checked in order
KAPPA_BANDS = (
    (0.0, "Poor (worse than chance)"),
    (0.20, "Slight agreement"),
    (0.40, "Fair agreement"),
    (0.60, "Moderate agreement"),
    (0.80, "Substantial agreement"),
)


@dataclass(frozen=True)
class AnalysisUnit:
    """One (paper, component) pair and its raters' dominant categories."""

    paper_id: str
    component: str
    ratings: tuple[str, ...]

    @property
    def counts(self) -> dict[str, int]:
        counts = dict.fromkeys(COARSE_LABELS, 0)
        for rating in self.ratings:
            if rating in counts:
                counts[rating] += 1
        return counts

    @property
    def rater_count(self) -> int:
        return sum(self.counts.values())


@dataclass
class KappaResult:
    kappa: float | None
    interpretation: str
    observed_agreement: int | None = None  # percent
    expected_agreement: int | None = None  # percent
    category_proportions: dict[str, float] = field(default_factory=dict)
    units: int = 0
    ratings: int = 0
    p_bar: float | None = None
    p_e: float | None = None

    @property
    def is_sufficient(self) -> bool:
        return self.kappa is not None

    @property
    def formula(self) -> str:
        if self.kappa is None:
            return ""
        return (
            f"κ = ({self.p_bar:.3f} - {self.p_e:.3f}) / (1 - {self.p_e:.3f}) = {self.kappa:.3f}"
        )


def interpret_kappa(kappa: float | None) -> str:
    if kappa is None:
        return INSUFFICIENT_DATA
    for upper, label in KAPPA_BANDS:
        if kappa < upper:
            return label
    return "Almost perfect agreement"


def _unit_counts(unit: AnalysisUnit | Sequence[str]) -> dict[str, int]:
    if isinstance(unit, AnalysisUnit):
        return unit.counts
    if isinstance(unit, (str, bytes)) or not isinstance(unit, Sequence):
        raise TypeError(f"unit must be an AnalysisUnit or a sequence of labels, got {type(unit).__name__}")
    return AnalysisUnit("", "", tuple(unit)).counts


def calculate_fleiss_kappa(units: Iterable[AnalysisUnit | Sequence[str]]) -> KappaResult:
    """Fleiss' Kappa with a variable number of raters per unit.

    Args:
        units: AnalysisUnits, or plain sequences of category labels.
            Labels outside positive/neutral/negative are ignored; units
            left with fewer than two ratings are skipped.

    Returns:
        KappaResult. If no unit qualifies, kappa is None and the
        interpretation reads "Insufficient data".

    Raises:
        TypeError: If units is not an iterable of units.
    """
    if units is None or isinstance(units, (str, bytes)) or not isinstance(units, Iterable):
        raise TypeError(f"units must be an iterable of analysis units, got {type(units).__name__}")

    table = [counts for counts in map(_unit_counts, units) if sum(counts.values()) >= config.MIN_RATERS]
    if not table:
        return KappaResult(kappa=None, interpretation=INSUFFICIENT_DATA)

    agreements = []
    for counts in table:
        k = sum(counts.values())
        agreements.append(sum(n * (n - 1) for n in counts.values()) / (k * (k - 1)))
    p_bar = sum(agreements) / len(agreements)

    total_ratings = sum(sum(counts.values()) for counts in table)
    proportions = {
        label: sum(counts[label] for counts in table) / total_ratings for label in COARSE_LABELS
    }
    p_e = sum(p * p for p in proportions.values())

    kappa = 1.0 if math.isclose(p_e, 1.0) else (p_bar - p_e) / (1 - p_e)

    return KappaResult(
        kappa=round(kappa, 3),
        interpretation=interpret_kappa(kappa),
        observed_agreement=round(p_bar * 100),
        expected_agreement=round(p_e * 100),
        category_proportions=proportions,
        units=len(table),
        ratings=total_ratings,
        p_bar=p_bar,
        p_e=p_e,
    )


def build_analysis_units(papers: Mapping[str, PaperGroup] | Iterable[PaperGroup]) -> list[AnalysisUnit]:
    """One unit per component that two or more evaluators of a paper commented on."""
    groups = papers.values() if isinstance(papers, Mapping) else papers
    units = []
    for group in groups:
        if not group.is_multi_evaluator:
            continue
        intersection = calculate_paper_intersection(group)
        for component, analysis in intersection.components.items():
            units.append(AnalysisUnit(group.paper_id, component, tuple(analysis.dominants)))
    return units
