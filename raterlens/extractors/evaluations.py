"""Evaluation-level field extractors (paper identity, evaluator, token)."""

import hashlib
import json
import logging
from datetime import datetime
from typing import Any

from ..expertise import as_profile
from ..schema import DEFAULT_SCHEMA, ExtractionSchema
from ..tree import first_text, get_path, get_text

logger = logging.getLogger(__name__)


def parse_datetime(dt_str: Any) -> datetime | None:
    """Parse ISO datetime string, returns None if empty or unparseable."""
    if not isinstance(dt_str, str) or not dt_str.strip():
        return None
    try:
        return datetime.fromisoformat(dt_str.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable timestamp: {dt_str!r}")
        return None


def resolve_paper_title(evaluation: Any, schema: ExtractionSchema = DEFAULT_SCHEMA) -> str | None:
    return first_text(evaluation, schema.title_paths)


def resolve_paper_doi(evaluation: Any, schema: ExtractionSchema = DEFAULT_SCHEMA) -> str | None:
    return first_text(evaluation, schema.doi_paths)


def resolve_paper_id(evaluation: Any, schema: ExtractionSchema = DEFAULT_SCHEMA) -> str | None:
    """Explicit paper id, falling back to DOI then title."""
    return (
        first_text(evaluation, schema.paper_id_paths)
        or resolve_paper_doi(evaluation, schema)
        or resolve_paper_title(evaluation, schema)
    )


def evaluator_identity(evaluation: Any) -> str | None:
    """Email of the evaluator, else "first last", else None."""
    profile = as_profile(get_path(evaluation, "userInfo"))
    return profile.identity if profile else None


def content_digest(evaluation: Any) -> str:
    """Short digest of the whole record, for evaluations without a token."""
    payload = json.dumps(evaluation, sort_keys=True, default=str)
    return hashlib.sha256(payload.encode()).hexdigest()[:16]


def evaluation_token(evaluation: Any) -> str:
    return get_text(evaluation, "token") or f"anon-{content_digest(evaluation)}"


def comment_id(token: str, component: str, subfield: str, ordinal: int) -> str:
    """Stable id for the ordinal-th comment of an evaluation."""
    key = f"{token}|{component}|{subfield}|{ordinal}"
    return hashlib.sha256(key.encode()).hexdigest()[:16]
