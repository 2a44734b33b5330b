"""Expert consensus: where do expert and advanced evaluators agree?"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .. import config
from ..extractors.grouping import ExpertiseBreakdown
from ..models import Comment
from ..sentiment.categories import NEGATIVE, NEUTRAL, POSITIVE
from .dominance import comment_category, dominant_category

logger = logging.getLogger(__name__)

UNANIMOUS = "unanimous"
MAJORITY = "majority"

_VERBS = {
    UNANIMOUS: {POSITIVE: "praise", NEGATIVE: "critique", NEUTRAL: "are neutral on"},
    MAJORITY: {POSITIVE: "favor", NEGATIVE: "critique", NEUTRAL: "are neutral on"},
}


@dataclass
class ConsensusFinding:
    component: str
    component_name: str
    consensus_type: str  # unanimous or majority
    sentiment: str
    expert_count: int  # evaluators backing the consensus sentiment
    strength: str
    message: str


@dataclass
class ComponentConsensus:
    """Qualifying comments on one component, split per evaluator."""

    name: str
    sentiments: dict[str, int] = field(default_factory=lambda: {POSITIVE: 0, NEUTRAL: 0, NEGATIVE: 0})
    by_expert: dict[str, dict[str, int]] = field(default_factory=dict)
    comments: list[Comment] = field(default_factory=list)

    @property
    def expert_count(self) -> int:
        return len(self.by_expert)


@dataclass
class ExpertConsensus:
    sufficient: bool
    findings: list[ConsensusFinding] = field(default_factory=list)
    components: dict[str, ComponentConsensus] = field(default_factory=dict)
    expert_count: int = 0
    total_expert_comments: int = 0
    interpretation: str = ""
    message: str = ""

    @property
    def has_consensus(self) -> bool:
        return bool(self.findings)

    @property
    def positive_consensus(self) -> list[ConsensusFinding]:
        return [f for f in self.findings if f.sentiment == POSITIVE]

    @property
    def negative_consensus(self) -> list[ConsensusFinding]:
        return [f for f in self.findings if f.sentiment == NEGATIVE]


def _qualifying(comments: Iterable[Comment] | None, by_expertise: ExpertiseBreakdown | None) -> list[Comment]:
    if by_expertise is not None:
        return [c for tier in config.EXPERT_TIERS for c in by_expertise.by_tier.get(tier, [])]
    if comments is None or isinstance(comments, (str, bytes)) or not isinstance(comments, Iterable):
        raise TypeError(f"comments must be an iterable of Comment, got {type(comments).__name__}")
    return [c for c in comments if c.tier in config.EXPERT_TIERS]


def _finding(component: str, data: ComponentConsensus) -> ConsensusFinding | None:
    dominants = [dominant_category(counts, strict=True) for counts in data.by_expert.values()]
    n = len(dominants)
    if len(set(dominants)) == 1:
        consensus_type, sentiment, support = UNANIMOUS, dominants[0], n
    else:
        top = max((POSITIVE, NEUTRAL, NEGATIVE), key=dominants.count)
        if dominants.count(top) <= n / 2:
            return None
        consensus_type, sentiment, support = MAJORITY, top, dominants.count(top)

    verb = _VERBS[consensus_type][sentiment]
    if consensus_type == UNANIMOUS:
        message = f"All {n} experts {verb} {data.name.lower()}"
    else:
        message = f"Majority ({support}) of {n} experts {verb} {data.name.lower()}"

    return ConsensusFinding(
        component=component,
        component_name=data.name,
        consensus_type=consensus_type,
        sentiment=sentiment,
        expert_count=support,
        strength="strong" if consensus_type == UNANIMOUS else "moderate",
        message=message,
    )


def _interpret(result: ExpertConsensus) -> str:
    praised = ", ".join(f.component_name for f in result.positive_consensus)
    concerns = ", ".join(f.component_name for f in result.negative_consensus)
    if praised and concerns:
        return (
            f"Expert consensus reveals clear patterns: {praised} receive consistent praise, "
            f"while {concerns} are areas of expert concern."
        )
    if praised:
        return f"Expert feedback shows consensus on strengths: {praised}."
    if concerns:
        return f"Expert feedback highlights areas needing attention: {concerns}."
    return "Expert opinions vary across components, indicating subjective evaluation dimensions."


def analyze_expert_consensus(
    comments: Iterable[Comment] | None,
    by_expertise: ExpertiseBreakdown | None = None,
) -> ExpertConsensus:
    """Find components on which expert and advanced evaluators agree.

    Args:
        comments: All extracted comments; only expert and advanced tiers
            are used.
        by_expertise: Pre-grouped comments. When given, its expert and
            advanced tiers are used instead of filtering ``comments``.

    Returns:
        ExpertConsensus. With fewer than three qualifying comments,
        ``sufficient`` is False and no findings are computed.
    """
    expert_comments = _qualifying(comments, by_expertise)
    result = ExpertConsensus(
        sufficient=False,
        expert_count=len({c.rater for c in expert_comments}),
        total_expert_comments=len(expert_comments),
    )
    if len(expert_comments) < config.MIN_EXPERT_COMMENTS:
        result.message = "Insufficient expert feedback for consensus analysis"
        return result

    for comment in expert_comments:
        data = result.components.get(comment.component)
        if data is None:
            data = result.components[comment.component] = ComponentConsensus(name=comment.component_name)
        category = comment_category(comment)
        data.sentiments[category] += 1
        data.comments.append(comment)
        data.by_expert.setdefault(comment.rater, {POSITIVE: 0, NEUTRAL: 0, NEGATIVE: 0})[category] += 1

    for component, data in result.components.items():
        if data.expert_count < config.MIN_RATERS:
            continue
        finding = _finding(component, data)
        if finding is not None:
            result.findings.append(finding)

    result.sufficient = True
    result.interpretation = _interpret(result)
    logger.debug(f"Expert consensus: {len(result.findings)} findings over {len(result.components)} components")
    return result
