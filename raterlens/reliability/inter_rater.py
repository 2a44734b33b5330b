"""Per-component inter-rater agreement across papers."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from .. import config
from ..models import Comment
from ..papers import normalize_title
from .dominance import count_categories, dominant_category


@dataclass
class PaperAgreement:
    paper_id: str
    dominants: dict[str, str]  # rater -> dominant category

    @property
    def evaluator_count(self) -> int:
        return len(self.dominants)

    @property
    def agreement(self) -> bool:
        return len(set(self.dominants.values())) == 1


@dataclass
class ComponentInterRater:
    component: str
    name: str
    papers: list[PaperAgreement] = field(default_factory=list)

    @property
    def has_inter_rater(self) -> bool:
        return bool(self.papers)

    @property
    def papers_analyzed(self) -> int:
        return len(self.papers)

    @property
    def agreement_count(self) -> int:
        return sum(1 for p in self.papers if p.agreement)

    @property
    def agreement_rate(self) -> int:
        if not self.papers:
            return 0
        return round(100 * self.agreement_count / self.papers_analyzed)


def _paper_key(comment: Comment) -> str:
    return normalize_title(comment.paper_title) or comment.paper_id


def calculate_component_inter_rater(comments: Iterable[Comment]) -> dict[str, ComponentInterRater]:
    """For each component, how often a paper's evaluators share a dominant sentiment.

    Papers where only one evaluator commented on the component are left
    out; a component with none left reports ``has_inter_rater`` False.
    """
    if comments is None or isinstance(comments, (str, bytes)):
        raise TypeError(f"comments must be an iterable of Comment, got {type(comments).__name__}")

    # component -> paper -> rater -> comments
    tree: dict[str, dict[str, dict[str, list[Comment]]]] = {}
    names: dict[str, str] = {}
    for comment in comments:
        papers = tree.setdefault(comment.component, {})
        papers.setdefault(_paper_key(comment), {}).setdefault(comment.rater, []).append(comment)
        names.setdefault(comment.component, comment.component_name)

    results = {}
    for component, papers in tree.items():
        analysis = ComponentInterRater(component=component, name=names[component])
        for paper_id, by_rater in papers.items():
            if len(by_rater) < config.MIN_RATERS:
                continue
            analysis.papers.append(
                PaperAgreement(
                    paper_id=paper_id,
                    dominants={
                        rater: dominant_category(count_categories(rater_comments))
                        for rater, rater_comments in by_rater.items()
                    },
                )
            )
        results[component] = analysis
    return results
