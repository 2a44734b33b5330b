"""Paper identity resolution.

Evaluations share no explicit paper key, so papers are identified by
normalized title. Matching is exact on the normalized string: titles that
differ by trailing punctuation or subtitle will not merge. That is a
known limitation; fuzzy matching is out of scope.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .expertise import as_profile, classify_expertise
from .extractors.evaluations import evaluation_token, resolve_paper_title
from .models import Comment, EvaluatorProfile
from .schema import DEFAULT_SCHEMA, ExtractionSchema
from .tree import get_path

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_title(title: Any) -> str | None:
    """Trim, case-fold and collapse whitespace. None for non-strings or blanks.

    Grouping evaluations and attaching comments must both go through this
    function, or comments silently fail to find their paper.
    """
    if not isinstance(title, str):
        return None
    normalized = _WHITESPACE.sub(" ", title.strip().casefold())
    return normalized or None


@dataclass
class EvaluatorDetail:
    """One evaluator's contribution to a paper."""

    identity: str
    profile: EvaluatorProfile | None
    tier: str
    evaluation_tokens: list[str] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)


@dataclass
class PaperGroup:
    """Evaluations and comments sharing one normalized title."""

    paper_id: str  # normalized title
    title: str  # first title seen, as written
    evaluators: set[str] = field(default_factory=set)
    evaluator_details: dict[str, EvaluatorDetail] = field(default_factory=dict)
    comments: list[Comment] = field(default_factory=list)

    @property
    def evaluator_count(self) -> int:
        return len(self.evaluators)

    @property
    def is_multi_evaluator(self) -> bool:
        return self.evaluator_count >= 2

    def comments_by_evaluator(self) -> dict[str, list[Comment]]:
        return {identity: detail.comments for identity, detail in self.evaluator_details.items()}


@dataclass
class PaperIndex:
    """Result of grouping a corpus by paper."""

    all_groups: dict[str, PaperGroup]
    missing_title: int = 0
    unattached_comments: int = 0

    @property
    def multi_evaluator_papers(self) -> dict[str, PaperGroup]:
        return {pid: g for pid, g in self.all_groups.items() if g.is_multi_evaluator}

    @property
    def total_papers(self) -> int:
        return len(self.all_groups)

    @property
    def papers_with_multiple_evaluators(self) -> int:
        return len(self.multi_evaluator_papers)

    @property
    def papers_with_single_evaluator(self) -> int:
        return self.total_papers - self.papers_with_multiple_evaluators


def find_multi_evaluator_papers(
    comments: Iterable[Comment],
    evaluations: Iterable[Any],
    schema: ExtractionSchema = DEFAULT_SCHEMA,
) -> PaperIndex:
    """Group evaluations by paper and attach their comments.

    Args:
        comments: Comments extracted from the same evaluations.
        evaluations: Raw evaluation records.
        schema: Where to look for paper titles.

    Returns:
        PaperIndex with every group; ``multi_evaluator_papers`` keeps those
        with two or more distinct evaluators. Only evaluations with an
        email or name add an evaluator; comments never do.

    Raises:
        TypeError: If evaluations is not a list or tuple.
    """
    if not isinstance(evaluations, (list, tuple)):
        raise TypeError(f"evaluations must be a list, got {type(evaluations).__name__}")

    groups: dict[str, PaperGroup] = {}
    missing_title = 0
    anonymous = 0

    for evaluation in evaluations:
        title = resolve_paper_title(evaluation, schema)
        paper_id = normalize_title(title)
        if paper_id is None:
            missing_title += 1
            continue

        profile = as_profile(get_path(evaluation, "userInfo"))
        identity = profile.identity if profile else None

        group = groups.get(paper_id)
        if group is None:
            group = groups[paper_id] = PaperGroup(paper_id=paper_id, title=title)
        if identity is None:
            anonymous += 1
            continue
        group.evaluators.add(identity)
        detail = group.evaluator_details.get(identity)
        if detail is None:
            detail = group.evaluator_details[identity] = EvaluatorDetail(
                identity=identity,
                profile=profile,
                tier=classify_expertise(profile).tier,
            )
        detail.evaluation_tokens.append(evaluation_token(evaluation))

    if missing_title:
        logger.warning(f"{missing_title} evaluations have no resolvable paper title; excluded from grouping")
    if anonymous:
        logger.warning(f"{anonymous} evaluations have no evaluator email or name; not counted as evaluators")

    unattached = 0
    for comment in comments:
        group = groups.get(normalize_title(comment.paper_title))
        if group is None:
            unattached += 1
            continue
        group.comments.append(comment)
        detail = group.evaluator_details.get(comment.evaluator) if comment.evaluator else None
        if detail is not None:
            detail.comments.append(comment)

    index = PaperIndex(all_groups=groups, missing_title=missing_title, unattached_comments=unattached)
    logger.info(
        f"Grouped {index.total_papers} papers, {index.papers_with_multiple_evaluators} with multiple evaluators"
    )
    return index


@dataclass
class PaperStatistics:
    total_papers: int
    papers_with_multiple_evaluators: int
    papers_with_single_evaluator: int
    average_evaluators_per_paper: float
    max_evaluators: int
    min_evaluators: int
    total_evaluation_sessions: int


def paper_statistics(
    comments: Iterable[Comment],
    evaluations: Iterable[Any],
    schema: ExtractionSchema = DEFAULT_SCHEMA,
) -> PaperStatistics:
    index = find_multi_evaluator_papers(comments, evaluations, schema)
    counts = [group.evaluator_count for group in index.all_groups.values()]
    return PaperStatistics(
        total_papers=index.total_papers,
        papers_with_multiple_evaluators=index.papers_with_multiple_evaluators,
        papers_with_single_evaluator=index.papers_with_single_evaluator,
        average_evaluators_per_paper=round(sum(counts) / len(counts), 1) if counts else 0.0,
        max_evaluators=max(counts, default=0),
        min_evaluators=min(counts, default=0),
        total_evaluation_sessions=sum(counts),
    )
