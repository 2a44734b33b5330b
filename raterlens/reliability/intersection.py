"""Per-paper component intersection: do a paper's evaluators agree?"""

from dataclasses import dataclass, field

from .. import config
from ..models import Comment
from ..papers import PaperGroup
from ..sentiment.categories import NEGATIVE, NEUTRAL, POSITIVE
from .dominance import count_categories, dominant_category


@dataclass
class EvaluatorSentiment:
    """One evaluator's sentiment on one component."""

    counts: dict[str, int]
    dominant: str

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def dominant_ratio(self) -> float:
        return self.counts[self.dominant] / self.total if self.total else 0.0


@dataclass
class ComponentIntersection:
    component: str
    name: str
    evaluator_sentiments: dict[str, EvaluatorSentiment]
    positive_evaluators: set[str] = field(default_factory=set)
    neutral_evaluators: set[str] = field(default_factory=set)
    negative_evaluators: set[str] = field(default_factory=set)

    @property
    def evaluator_count(self) -> int:
        return len(self.evaluator_sentiments)

    @property
    def dominants(self) -> list[str]:
        return [s.dominant for s in self.evaluator_sentiments.values()]

    @property
    def agreement(self) -> bool:
        return len(set(self.dominants)) == 1

    @property
    def dominant_if_agree(self) -> str | None:
        return self.dominants[0] if self.agreement else None

    @property
    def positive_count(self) -> int:
        return len(self.positive_evaluators)

    @property
    def neutral_count(self) -> int:
        return len(self.neutral_evaluators)

    @property
    def negative_count(self) -> int:
        return len(self.negative_evaluators)

    @property
    def all_positive(self) -> bool:
        return self.positive_count == self.evaluator_count

    @property
    def all_negative(self) -> bool:
        return self.negative_count == self.evaluator_count

    @property
    def some_positive(self) -> bool:
        return 0 < self.positive_count < self.evaluator_count

    @property
    def some_negative(self) -> bool:
        return 0 < self.negative_count < self.evaluator_count

    def category_counts(self) -> dict[str, int]:
        """How many evaluators have each category as their dominant."""
        counts = dict.fromkeys((POSITIVE, NEUTRAL, NEGATIVE), 0)
        for dominant in self.dominants:
            counts[dominant] += 1
        return counts


@dataclass
class PaperIntersection:
    paper_id: str
    title: str
    evaluator_count: int
    has_intersection: bool
    components: dict[str, ComponentIntersection] = field(default_factory=dict)
    message: str = ""
    interpretation: str = ""

    @property
    def total_components(self) -> int:
        return len(self.components)

    @property
    def agreement_count(self) -> int:
        return sum(1 for c in self.components.values() if c.agreement)

    @property
    def disagreement_count(self) -> int:
        return self.total_components - self.agreement_count

    @property
    def agreement_rate(self) -> int:
        """Percent of components where every evaluator agrees."""
        if not self.total_components:
            return 0
        return round(100 * self.agreement_count / self.total_components)


def _interpret(components: dict[str, ComponentIntersection], evaluator_count: int) -> str:
    text = f"{evaluator_count} evaluators assessed this paper. "
    if not components:
        return text + "No component was commented on by more than one evaluator."

    agreed = [c for c in components.values() if c.agreement]
    disagreed = [c for c in components.values() if not c.agreement]

    if not disagreed:
        text += f"Complete agreement across all {len(agreed)} components. "
        positive = sum(1 for c in agreed if c.dominant_if_agree == POSITIVE)
        if positive > len(agreed) / 2:
            text += "Evaluators consistently viewed the analysis positively."
        else:
            text += "Evaluators share similar critical perspectives."
    elif not agreed:
        text += (
            f"Evaluators disagree on all {len(disagreed)} components, "
            "suggesting subjective interpretation differences."
        )
    else:
        text += f"Agreement on {len(agreed)}/{len(components)} components. "
        text += f"Divergent views on: {', '.join(c.name for c in disagreed)}."
    return text


def calculate_paper_intersection(group: PaperGroup) -> PaperIntersection:
    """Compare evaluators' dominant sentiment per component on one paper.

    Only components with comments from at least two evaluators count.

    Raises:
        TypeError: If group is not a PaperGroup.
    """
    if not isinstance(group, PaperGroup):
        raise TypeError(f"expected PaperGroup, got {type(group).__name__}")

    result = PaperIntersection(
        paper_id=group.paper_id,
        title=group.title,
        evaluator_count=group.evaluator_count,
        has_intersection=False,
    )
    if group.evaluator_count < config.MIN_RATERS:
        result.message = f"Need at least {config.MIN_RATERS} evaluators"
        return result

    # component -> evaluator -> comments, in first-seen order
    by_component: dict[str, dict[str, list[Comment]]] = {}
    names: dict[str, str] = {}
    for identity, comments in group.comments_by_evaluator().items():
        for comment in comments:
            by_component.setdefault(comment.component, {}).setdefault(identity, []).append(comment)
            names.setdefault(comment.component, comment.component_name)

    for component, per_evaluator in by_component.items():
        if len(per_evaluator) < config.MIN_RATERS:
            continue
        analysis = ComponentIntersection(component=component, name=names[component], evaluator_sentiments={})
        for identity, comments in per_evaluator.items():
            counts = count_categories(comments)
            analysis.evaluator_sentiments[identity] = EvaluatorSentiment(counts, dominant_category(counts))
            if counts[POSITIVE]:
                analysis.positive_evaluators.add(identity)
            if counts[NEUTRAL]:
                analysis.neutral_evaluators.add(identity)
            if counts[NEGATIVE]:
                analysis.negative_evaluators.add(identity)
        result.components[component] = analysis

    result.has_intersection = True
    result.interpretation = _interpret(result.components, group.evaluator_count)
    return result
