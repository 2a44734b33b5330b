"""Group extracted comments by component, evaluation and expertise."""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..models import Comment


def group_comments_by_component(comments: Iterable[Comment]) -> dict[str, list[Comment]]:
    grouped: dict[str, list[Comment]] = defaultdict(list)
    for comment in comments:
        grouped[comment.component].append(comment)
    return dict(grouped)


def group_comments_by_paper(comments: Iterable[Comment]) -> dict[str, list[Comment]]:
    """Comments keyed by evaluation token (one evaluation covers one paper)."""
    grouped: dict[str, list[Comment]] = defaultdict(list)
    for comment in comments:
        grouped[comment.evaluation_token].append(comment)
    return dict(grouped)


@dataclass
class ExpertiseBreakdown:
    """Comments partitioned three ways by who wrote them."""

    by_tier: dict[str, list[Comment]] = field(default_factory=dict)
    by_role: dict[str, list[Comment]] = field(default_factory=dict)
    by_domain: dict[str, list[Comment]] = field(default_factory=dict)

    @property
    def comments(self) -> list[Comment]:
        return [c for tier_comments in self.by_tier.values() for c in tier_comments]


def group_comments_by_expertise(comments: Iterable[Comment]) -> ExpertiseBreakdown:
    breakdown = ExpertiseBreakdown()
    for comment in comments:
        breakdown.by_tier.setdefault(comment.tier, []).append(comment)
        breakdown.by_role.setdefault(comment.role, []).append(comment)
        domain = comment.expertise.raw_domain_expertise or "Unknown"
        breakdown.by_domain.setdefault(domain, []).append(comment)
    return breakdown


@dataclass
class CommentStatistics:
    total: int
    by_component: dict[str, int]
    by_tier: dict[str, int]
    component_names: dict[str, str]
    average_length: float
    with_rating: int
    unique_evaluators: int
    unique_evaluations: int


def comment_statistics(comments: Iterable[Comment]) -> CommentStatistics:
    comments = list(comments)
    by_component: dict[str, int] = defaultdict(int)
    by_tier: dict[str, int] = defaultdict(int)
    for comment in comments:
        by_component[comment.component] += 1
        by_tier[comment.tier] += 1

    return CommentStatistics(
        total=len(comments),
        by_component=dict(by_component),
        by_tier=dict(by_tier),
        component_names={c.component: c.component_name for c in comments},
        average_length=sum(len(c.text) for c in comments) / len(comments) if comments else 0.0,
        with_rating=sum(1 for c in comments if c.rating is not None),
        unique_evaluators=len({c.rater for c in comments}),
        unique_evaluations=len({c.evaluation_token for c in comments}),
    )
