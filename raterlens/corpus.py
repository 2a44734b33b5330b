"""Load evaluation records and freeze them into a per-run snapshot."""

import copy
import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Keys under which exporters wrap the evaluation list
WRAPPER_KEYS = ("evaluations", "items", "data")


def _unwrap(data: Any) -> list:
    if isinstance(data, list):
        return data
    if isinstance(data, Mapping):
        for key in WRAPPER_KEYS:
            if isinstance(data.get(key), list):
                return data[key]
    raise ValueError(
        f"Expected a list of evaluations or a mapping with one of {', '.join(WRAPPER_KEYS)}"
    )


def load_evaluations(path: Path | str) -> list[dict[str, Any]]:
    """Read evaluation records from a JSON file.

    Raises:
        ValueError: If the file holds neither a list nor a wrapped list.
    """
    with open(path) as f:
        data = json.load(f)
    evaluations = _unwrap(data)
    logger.info(f"Loaded {len(evaluations)} evaluations from {path}")
    return evaluations


@dataclass(frozen=True)
class Corpus:
    """Immutable snapshot of the evaluations one analysis pass sees.

    Records are deep-copied on the way in, so later changes to the
    caller's data can't leak into a running analysis.
    """

    evaluations: tuple[Any, ...] = ()
    source: str | None = None

    @classmethod
    def from_records(cls, records: Iterable[Any], source: str | None = None) -> "Corpus":
        if records is None or isinstance(records, (str, bytes, Mapping)):
            raise TypeError(f"records must be an iterable of evaluations, got {type(records).__name__}")
        return cls(evaluations=tuple(copy.deepcopy(list(records))), source=source)

    @classmethod
    def load(cls, path: Path | str) -> "Corpus":
        return cls.from_records(load_evaluations(path), source=str(path))

    def __len__(self) -> int:
        return len(self.evaluations)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.evaluations)
