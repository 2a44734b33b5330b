"""Comment extractor: one evaluation record in, atomic feedback units out."""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .. import config
from ..expertise import as_profile, classify_expertise
from ..models import Comment, ExpertiseClass
from ..schema import DEFAULT_SCHEMA, ComponentSpec, ExtractionSchema
from ..tree import get_number, get_path, get_text
from .evaluations import (
    comment_id,
    evaluation_token,
    evaluator_identity,
    parse_datetime,
    resolve_paper_doi,
    resolve_paper_id,
    resolve_paper_title,
)

logger = logging.getLogger(__name__)


@dataclass
class _Context:
    """Evaluation-level values shared by every comment of one record."""

    token: str
    evaluator: str | None
    role: str
    expertise: ExpertiseClass
    paper_id: str
    paper_title: str | None
    paper_doi: str | None
    timestamp: datetime | None


def _context(evaluation: Any, schema: ExtractionSchema) -> _Context:
    user_info = get_path(evaluation, "userInfo")
    profile = as_profile(user_info)
    title = resolve_paper_title(evaluation, schema)
    return _Context(
        token=evaluation_token(evaluation),
        evaluator=evaluator_identity(evaluation),
        role=(profile.role if profile and profile.role else "Unknown"),
        expertise=classify_expertise(profile),
        paper_id=resolve_paper_id(evaluation, schema) or "unknown",
        paper_title=title,
        paper_doi=resolve_paper_doi(evaluation, schema),
        timestamp=parse_datetime(get_path(evaluation, "timestamp")),
    )


def _raw_comments(evaluation: Any, spec: ComponentSpec) -> Iterator[tuple[str, str, float | None]]:
    """(subfield, text, rating) for every non-empty comment of a component."""
    for field_spec in spec.fields:
        text = get_text(evaluation, field_spec.path)
        if text is None:
            continue
        rating = get_number(evaluation, field_spec.rating_path) if field_spec.rating_path else None
        yield field_spec.subfield, text, rating

    dynamic = spec.dynamic
    if dynamic is None:
        return
    root = get_path(evaluation, dynamic.root)
    if not isinstance(root, Mapping):
        return
    for key, child in root.items():
        if not isinstance(child, Mapping):
            continue
        text = get_text(child, [dynamic.comment_key])
        if text is None:
            continue
        label = get_text(child, [dynamic.label_key]) if dynamic.label_key else None
        rating = get_number(child, [dynamic.rating_key]) if dynamic.rating_key else None
        yield label or str(key), text, rating


def extract_comments_from_evaluation(
    evaluation: Any, schema: ExtractionSchema = DEFAULT_SCHEMA
) -> list[Comment]:
    """Extract every comment an evaluator left in one evaluation.

    Any value that isn't a mapping yields no comments. Duplicates (same
    component, subfield and text prefix) are kept once, first wins.
    """
    if not isinstance(evaluation, Mapping):
        return []

    ctx = _context(evaluation, schema)
    comments: list[Comment] = []
    seen: set[tuple[str, str, str]] = set()

    for component, spec in schema.components.items():
        for subfield, text, rating in _raw_comments(evaluation, spec):
            key = (component, subfield, text[: config.DEDUP_PREFIX_CHARS])
            if key in seen:
                continue
            seen.add(key)
            comments.append(
                Comment(
                    id=comment_id(ctx.token, component, subfield, len(comments)),
                    component=component,
                    component_name=spec.name,
                    subfield=subfield,
                    text=text,
                    rating=rating,
                    evaluator=ctx.evaluator,
                    evaluation_token=ctx.token,
                    paper_id=ctx.paper_id,
                    paper_title=ctx.paper_title,
                    paper_doi=ctx.paper_doi,
                    timestamp=ctx.timestamp,
                    expertise=ctx.expertise,
                    role=ctx.role,
                )
            )

    return comments


def extract_all_comments(evaluations: Any, schema: ExtractionSchema = DEFAULT_SCHEMA) -> list[Comment]:
    """Flatten comments from a collection of evaluations, in input order.

    Raises:
        TypeError: If evaluations is not a list or tuple.
    """
    if not isinstance(evaluations, (list, tuple)):
        raise TypeError(f"evaluations must be a list, got {type(evaluations).__name__}")

    comments: list[Comment] = []
    for evaluation in evaluations:
        comments.extend(extract_comments_from_evaluation(evaluation, schema))

    logger.info(f"Extracted {len(comments)} comments from {len(evaluations)} evaluations")
    return comments
