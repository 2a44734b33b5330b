"""Expertise-tier preferences and cross-tier agreement."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from .. import config
from ..extractors.grouping import ExpertiseBreakdown, group_comments_by_expertise
from ..models import Comment
from ..sentiment.categories import NEGATIVE, POSITIVE
from .dominance import count_categories, dominant_category

RANKED_TIERS = ("expert", "advanced", "intermediate", "basic")


@dataclass
class ComponentScore:
    name: str
    sentiments: dict[str, int]

    @property
    def total(self) -> int:
        return sum(self.sentiments.values())

    @property
    def positive_ratio(self) -> float:
        return self.sentiments[POSITIVE] / self.total if self.total else 0.0

    @property
    def negative_ratio(self) -> float:
        return self.sentiments[NEGATIVE] / self.total if self.total else 0.0

    @property
    def net_score(self) -> float:
        return self.positive_ratio - self.negative_ratio

    @property
    def lean(self) -> str:
        return dominant_category(self.sentiments, strict=True)


@dataclass
class TierPreferences:
    tier: str
    total_comments: int
    by_component: dict[str, ComponentScore]

    def _ranked(self) -> list[tuple[str, ComponentScore]]:
        return sorted(self.by_component.items(), key=lambda item: item[1].net_score, reverse=True)

    @property
    def favorite(self) -> tuple[str, ComponentScore] | None:
        ranked = self._ranked()
        return ranked[0] if ranked else None

    @property
    def concern(self) -> tuple[str, ComponentScore] | None:
        ranked = self._ranked()
        return ranked[-1] if len(ranked) > 1 else None


@dataclass
class TierOverlap:
    """Each tier's lean on one component."""

    name: str
    tier_leans: dict[str, str]

    @property
    def tiers_with_data(self) -> int:
        return len(self.tier_leans)

    @property
    def all_agree(self) -> bool:
        return len(set(self.tier_leans.values())) <= 1

    @property
    def shared_lean(self) -> str | None:
        return next(iter(self.tier_leans.values())) if self.all_agree and self.tier_leans else None


@dataclass
class CrossTierAgreement:
    components: dict[str, TierOverlap] = field(default_factory=dict)

    def _comparable(self) -> dict[str, TierOverlap]:
        return {k: v for k, v in self.components.items() if v.tiers_with_data >= config.MIN_RATERS}

    @property
    def agreement_zone(self) -> list[str]:
        return [k for k, v in self._comparable().items() if v.all_agree]

    @property
    def divergence_zone(self) -> list[str]:
        return [k for k, v in self._comparable().items() if not v.all_agree]

    @property
    def agreement_rate(self) -> int:
        compared = len(self._comparable())
        return round(100 * len(self.agreement_zone) / compared) if compared else 0


@dataclass
class ExpertisePreferences:
    preferences: dict[str, TierPreferences] = field(default_factory=dict)
    cross_tier: CrossTierAgreement | None = None
    interpretation: str = ""


def _tier_preferences(tier: str, comments: list[Comment]) -> TierPreferences:
    by_component: dict[str, list[Comment]] = {}
    names: dict[str, str] = {}
    for comment in comments:
        by_component.setdefault(comment.component, []).append(comment)
        names.setdefault(comment.component, comment.component_name)
    return TierPreferences(
        tier=tier,
        total_comments=len(comments),
        by_component={
            component: ComponentScore(names[component], count_categories(component_comments))
            for component, component_comments in by_component.items()
        },
    )


def _cross_tier(preferences: dict[str, TierPreferences]) -> CrossTierAgreement | None:
    if len(preferences) < config.MIN_RATERS:
        return None
    agreement = CrossTierAgreement()
    for tier, prefs in preferences.items():
        for component, score in prefs.by_component.items():
            overlap = agreement.components.get(component)
            if overlap is None:
                overlap = agreement.components[component] = TierOverlap(name=score.name, tier_leans={})
            overlap.tier_leans[tier] = score.lean
    return agreement


def _pct(ratio: float) -> str:
    return f"{ratio * 100:.0f}%"


def _interpret(preferences: dict[str, TierPreferences]) -> str:
    parts = []
    expert = preferences.get("expert")
    expert_favorite = expert.favorite if expert else None

    if expert_favorite:
        _, fav = expert_favorite
        parts.append(f"Domain experts favor {fav.name} ({_pct(fav.positive_ratio)} positive)")
        if expert.concern and expert.concern[1].negative_ratio > 0.2:
            con = expert.concern[1]
            parts.append(f"but express concern about {con.name} ({_pct(con.negative_ratio)} negative)")

    advanced = preferences.get("advanced")
    if advanced and advanced.favorite and expert_favorite and advanced.favorite[0] != expert_favorite[0]:
        fav = advanced.favorite[1]
        parts.append(f"Advanced evaluators prefer {fav.name} ({_pct(fav.positive_ratio)} positive)")

    basic = preferences.get("basic")
    if basic and basic.favorite and expert_favorite:
        fav = basic.favorite[1]
        if basic.favorite[0] != expert_favorite[0]:
            parts.append(
                f"Basic evaluators favor {fav.name} ({_pct(fav.positive_ratio)} positive), differing from experts"
            )
        else:
            parts.append(f"Basic evaluators agree with experts, favoring {fav.name}")

    return ". ".join(parts) + "." if parts else "Insufficient data for expertise comparison."


def analyze_expertise_preferences(source: ExpertiseBreakdown | Iterable[Comment]) -> ExpertisePreferences:
    """What each expertise tier likes and dislikes, and where tiers agree.

    Args:
        source: An ExpertiseBreakdown, or comments to group by tier.

    Returns:
        ExpertisePreferences. ``cross_tier`` is None when fewer than two
        tiers have comments.
    """
    if isinstance(source, ExpertiseBreakdown):
        breakdown = source
    elif source is None or isinstance(source, (str, bytes)) or not isinstance(source, Iterable):
        raise TypeError(f"expected ExpertiseBreakdown or comments, got {type(source).__name__}")
    else:
        breakdown = group_comments_by_expertise(source)

    preferences = {
        tier: _tier_preferences(tier, breakdown.by_tier[tier])
        for tier in RANKED_TIERS
        if breakdown.by_tier.get(tier)
    }
    return ExpertisePreferences(
        preferences=preferences,
        cross_tier=_cross_tier(preferences),
        interpretation=_interpret(preferences),
    )
