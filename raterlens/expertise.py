"""Evaluator expertise classification.

Turns a free-form evaluator profile into a composite score on a 0-5
scale and a coarse tier. Unknown roles and domains fall back to table
defaults; nothing here raises for odd profile data.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from .models import EvaluatorProfile, ExpertiseClass


@dataclass(frozen=True)
class RoleInfo:
    weight: float
    label: str
    credibility: str


@dataclass(frozen=True)
class DomainInfo:
    multiplier: float
    label: str
    boost: str


ROLES = {
    "Professor": RoleInfo(5.0, "Professor", "highly credible"),
    "PostDoc": RoleInfo(4.0, "PostDoc", "highly credible"),
    "Senior Researcher": RoleInfo(4.0, "Senior Researcher", "highly credible"),
    "Researcher": RoleInfo(3.5, "Researcher", "credible"),
    "PhD Student": RoleInfo(3.0, "PhD Student", "credible"),
    "Research Assistant": RoleInfo(2.5, "Research Assistant", "moderately credible"),
    "Master Student": RoleInfo(2.0, "Master Student", "emerging"),
    "Bachelor Student": RoleInfo(1.5, "Bachelor Student", "emerging"),
    "Other": RoleInfo(1.0, "Other", "general"),
}

DOMAINS = {
    "Expert": DomainInfo(2.0, "Domain Expert", "with deep domain knowledge"),
    "Advanced": DomainInfo(1.5, "Advanced", "with strong domain background"),
    "Intermediate": DomainInfo(1.0, "Intermediate", "with relevant domain experience"),
    "Basic": DomainInfo(0.8, "Basic", "with basic domain understanding"),
    "Novice": DomainInfo(0.6, "Novice", "new to the domain"),
}

EVALUATION_EXPERIENCE = {
    "Extensive": 1.3,
    "Moderate": 1.1,
    "Limited": 1.0,
    "None": 0.9,
}

ORKG_BONUS = 0.05  # for evaluators who have used ORKG before

MAX_SCORE = 5.0

# (threshold, tier, level), highest first
TIERS = (
    (4.0, "expert", "Expert Level"),
    (3.0, "advanced", "Advanced Level"),
    (2.0, "intermediate", "Intermediate Level"),
    (float("-inf"), "basic", "Basic Level"),
)

TIER_ORDER = ("expert", "advanced", "intermediate", "basic", "unknown")

UNKNOWN = ExpertiseClass(
    tier="unknown",
    composite_score=1.0,
    level="unknown",
    display_label="Unknown Evaluator",
    credibility_statement="an evaluator",
)


def as_profile(profile: EvaluatorProfile | Mapping[str, Any] | None) -> EvaluatorProfile | None:
    """Coerce a userInfo mapping to a profile, None if it isn't one."""
    if profile is None or isinstance(profile, EvaluatorProfile):
        return profile
    if not isinstance(profile, Mapping):
        return None
    try:
        return EvaluatorProfile.model_validate(dict(profile))
    except ValidationError as e:
        # Keep what parses: drop the fields pydantic rejected
        rejected = {err["loc"][0] for err in e.errors() if err["loc"]}
        return EvaluatorProfile.model_validate({k: v for k, v in profile.items() if k not in rejected})


def _supplied_weight(profile: EvaluatorProfile) -> float | None:
    weight = profile.expertise_weight
    if weight is None and profile.weight_components is not None:
        weight = profile.weight_components.final_weight
    if weight is None:
        return None
    return max(0.0, min(MAX_SCORE, weight))


def tier_for_score(score: float) -> tuple[str, str]:
    """(tier, level) for a composite score."""
    for threshold, tier, level in TIERS:
        if score >= threshold:
            return tier, level
    return TIERS[-1][1], TIERS[-1][2]


def classify_expertise(profile: EvaluatorProfile | Mapping[str, Any] | None) -> ExpertiseClass:
    """Classify an evaluator by role, domain expertise and any supplied weight.

    Args:
        profile: The evaluation's userInfo block (mapping or model), or None.

    Returns:
        ExpertiseClass; tier "unknown" with score 1.0 if there is no profile.
    """
    parsed = as_profile(profile)
    if parsed is None:
        return UNKNOWN

    role = parsed.role or "Other"
    role_info = ROLES.get(role, ROLES["Other"])
    domain = parsed.domain_expertise or "Intermediate"
    domain_info = DOMAINS.get(domain, DOMAINS["Intermediate"])

    score = _supplied_weight(parsed)
    if score is None:
        score = min(MAX_SCORE, role_info.weight * domain_info.multiplier)

    tier, level = tier_for_score(score)
    return ExpertiseClass(
        tier=tier,
        composite_score=score,
        level=level,
        display_label=f"{role_info.label} ({domain_info.label})",
        credibility_statement=f"a {role_info.credibility} {role_info.label} {domain_info.boost}",
        raw_role=role,
        raw_domain_expertise=domain,
        raw_evaluation_experience=parsed.evaluation_experience,
    )


@dataclass
class WeightBreakdown:
    """Full expertise weight with each factor exposed."""

    role_weight: float
    domain_multiplier: float
    experience_multiplier: float
    orkg_bonus: float
    final_weight: float

    def describe(self) -> list[str]:
        return [
            f"Role Weight: {self.role_weight:.2f}",
            f"Domain Multiplier: {self.domain_multiplier:.2f}",
            f"Experience Multiplier: {self.experience_multiplier:.2f}",
            f"ORKG Bonus: {self.orkg_bonus * 100:.0f}%",
            f"Final Weight: {self.final_weight:.2f}/5",
        ]


def calculate_expertise_weight(
    role: str | None,
    domain_expertise: str | None,
    evaluation_experience: str | None,
    orkg_experience: str = "never",
) -> WeightBreakdown:
    """Weight including evaluation experience and ORKG familiarity, clamped to [1, 5]."""
    role_weight = ROLES.get(role or "Other", ROLES["Other"]).weight
    domain_multiplier = DOMAINS.get(domain_expertise or "Intermediate", DOMAINS["Intermediate"]).multiplier
    experience_multiplier = EVALUATION_EXPERIENCE.get(evaluation_experience or "Limited", 1.0)
    orkg_bonus = ORKG_BONUS if orkg_experience == "used" else 0.0

    combined = role_weight * domain_multiplier * experience_multiplier * (1 + orkg_bonus)
    return WeightBreakdown(
        role_weight=role_weight,
        domain_multiplier=domain_multiplier,
        experience_multiplier=experience_multiplier,
        orkg_bonus=orkg_bonus,
        final_weight=min(max(combined, 1.0), MAX_SCORE),
    )


def confidence_level(weight: float) -> str:
    if weight >= 4:
        return "High"
    if weight >= 2.5:
        return "Medium"
    return "Low"
