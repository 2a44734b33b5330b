"""Shared test fixtures."""

import pytest

from raterlens.models import Comment, ExpertiseClass

TIER_SCORES = {"expert": 5.0, "advanced": 3.5, "intermediate": 2.5, "basic": 1.5, "unknown": 1.0}


def build_user(**overrides) -> dict:
    base = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.org",
        "role": "Professor",
        "domainExpertise": "Expert",
        "evaluationExperience": "Extensive",
    }
    base.update(overrides)
    return base


def build_evaluation(
    title: str | None = "Graph Neural Networks",
    token: str = "tok-1",
    user: dict | None = None,
    metadata: dict | None = None,
    **overrides,
) -> dict:
    """Evaluation record with metadata feedback.

    ``metadata`` maps a metadata sub-field (title, authors, doi, ...) to
    its feedback block, e.g. {"title": {"comments": "...", "rating": 4}}.
    """
    if metadata is None:
        metadata = {"title": {"comments": "The title was extracted correctly", "rating": 4}}
    meta: dict = {"title": {"extractedValue": title}} if title is not None else {}
    for key, block in metadata.items():
        meta.setdefault(key, {}).update(block)

    base = {
        "token": token,
        "timestamp": "2025-01-10T09:00:00Z",
        "userInfo": build_user() if user is None else user,
        "evaluationMetrics": {"overall": {"metadata": meta}},
    }
    base.update(overrides)
    return base


def build_comment(tier: str = "expert", **overrides) -> Comment:
    base = {
        "id": "c1",
        "component": "metadata",
        "component_name": "Metadata",
        "subfield": "Title",
        "text": "Excellent extraction",
        "rating": None,
        "evaluator": "ada@example.org",
        "evaluation_token": "tok-1",
        "paper_id": "graph neural networks",
        "paper_title": "Graph Neural Networks",
        "paper_doi": None,
        "timestamp": None,
        "expertise": ExpertiseClass(
            tier=tier,
            composite_score=TIER_SCORES[tier],
            level=f"{tier.title()} Level",
            display_label=tier.title(),
            credibility_statement=f"a {tier} evaluator",
        ),
        "role": "Professor",
    }
    base.update(overrides)
    return Comment(**base)


@pytest.fixture
def make_user():
    """Factory for userInfo blocks."""
    return build_user


@pytest.fixture
def make_evaluation():
    """Factory for evaluation records."""
    return build_evaluation


@pytest.fixture
def make_comment():
    """Factory for Comment models with a given tier."""
    return build_comment


@pytest.fixture
def corpus():
    """Two papers: one single-evaluator, one shared by an expert and a novice."""
    return [
        build_evaluation(
            title="Paper X",
            token="tok-e1",
            user=build_user(email="e1@example.org"),
            metadata={"title": {"comments": "excellent extraction", "rating": 5}},
        ),
        build_evaluation(
            title="  paper   x ",
            token="tok-e2",
            user=build_user(
                email="e2@example.org", role="Bachelor Student", domainExpertise="Novice"
            ),
            metadata={"title": {"comments": "terrible extraction, wrong title", "rating": 1}},
        ),
        build_evaluation(
            title="Graph Neural Networks",
            token="tok-e3",
            user=build_user(email="e3@example.org"),
            metadata={"authors": {"comments": "Authors look good", "rating": 4}},
        ),
    ]
