"""Declarative schema for pulling comments out of evaluation records.

Each component lists the paths where comment text lives:

    components:
      metadata:
        name: Metadata
        fields:
          - path: evaluationMetrics.overall.metadata.title.comments
            subfield: Title
            rating_path: evaluationMetrics.overall.metadata.title.rating

A component can instead be dynamic, for feedback whose sub-fields are
only known at runtime (e.g. one entry per extracted paper property):

      content:
        name: Content
        dynamic:
          root: evaluationMetrics.overall.content
          comment_key: comments
          rating_key: rating

Paths are dotted; numeric segments index into lists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from . import config

SCHEMA_FILENAMES = ["raterlens.yaml", ".raterlens.yaml", "raterlens.yml", ".raterlens.yml"]


@dataclass(frozen=True)
class FieldSpec:
    """One comment location within a component."""

    path: str
    subfield: str
    rating_path: str | None = None


@dataclass(frozen=True)
class DynamicSpec:
    """Comments keyed by whatever children exist under a root path."""

    root: str
    comment_key: str = "comments"
    rating_key: str | None = "rating"
    label_key: str | None = "label"


@dataclass
class ComponentSpec:
    """A named evaluation dimension and where its comments live."""

    name: str
    fields: list[FieldSpec] = field(default_factory=list)
    dynamic: DynamicSpec | None = None

    @property
    def is_dynamic(self) -> bool:
        return self.dynamic is not None


def _rated(base: str, subfield: str, rated: bool = True) -> FieldSpec:
    """Field following the common ``<base>.comments`` / ``<base>.rating`` layout."""
    return FieldSpec(f"{base}.comments", subfield, f"{base}.rating" if rated else None)


_META = "evaluationMetrics.overall.metadata"
_FIELD = "evaluationMetrics.overall.research_field"
_PROBLEM = "evaluationMetrics.overall.research_problem.overall.research_problem.userRatings"
_TEMPLATE = "evaluationMetrics.overall.template"
_SYSTEM = "evaluationMetrics.systemPerformance.systemPerformance"
_INNOVATION = "evaluationMetrics.innovation.innovation"
_COMPARATIVE = "evaluationMetrics.comparativeAnalysis.comparativeAnalysis"
_RAG = "evaluationMetrics.ragHighlight.ragHighlight"


def default_components() -> dict[str, ComponentSpec]:
    """Component table of the paper-analysis evaluation form."""
    return {
        "metadata": ComponentSpec("Metadata", [
            _rated(f"{_META}.title", "Title"),
            _rated(f"{_META}.authors", "Authors"),
            _rated(f"{_META}.doi", "DOI"),
            _rated(f"{_META}.venue", "Venue"),
            _rated(f"{_META}.publication_year", "Publication Year"),
        ]),
        "research_field": ComponentSpec("Research Field", [
            _rated(f"{_FIELD}.primaryField", "Primary Field"),
            _rated(f"{_FIELD}.confidence", "Confidence"),
            _rated(f"{_FIELD}.consistency", "Consistency"),
            _rated(f"{_FIELD}.relevance", "Relevance"),
            FieldSpec(f"{_FIELD}.comments", "Overall"),
        ]),
        "research_problem": ComponentSpec("Research Problem", [
            _rated(f"{_PROBLEM}.problemTitle", "Problem Title"),
            _rated(f"{_PROBLEM}.problemDescription", "Problem Description"),
            _rated(f"{_PROBLEM}.relevance", "Relevance"),
            _rated(f"{_PROBLEM}.completeness", "Completeness"),
            _rated(f"{_PROBLEM}.evidenceQuality", "Evidence Quality"),
            FieldSpec(f"{_PROBLEM}.overallComments", "Overall", f"{_PROBLEM}.overallRating"),
        ]),
        "template": ComponentSpec("Template", [
            FieldSpec(f"{_TEMPLATE}.titleAccuracyComments", "Title Accuracy", f"{_TEMPLATE}.titleAccuracy"),
            FieldSpec(f"{_TEMPLATE}.descriptionQualityComments", "Description Quality", f"{_TEMPLATE}.descriptionQuality"),
            FieldSpec(f"{_TEMPLATE}.propertyCoverageComments", "Property Coverage", f"{_TEMPLATE}.propertyCoverage"),
            FieldSpec(f"{_TEMPLATE}.researchAlignmentComments", "Research Alignment", f"{_TEMPLATE}.researchAlignment"),
            FieldSpec(f"{_TEMPLATE}.overallComments", "Overall"),
        ]),
        "content": ComponentSpec("Content", dynamic=DynamicSpec("evaluationMetrics.overall.content")),
        "system_performance": ComponentSpec("System Performance", [
            _rated(f"{_SYSTEM}.responsiveness", "Responsiveness"),
            _rated(f"{_SYSTEM}.errors", "Errors"),
            _rated(f"{_SYSTEM}.stability", "Stability"),
            _rated(f"{_SYSTEM}.overall", "Overall"),
        ]),
        "innovation": ComponentSpec("Innovation", [
            _rated(f"{_INNOVATION}.novelty", "Novelty"),
            _rated(f"{_INNOVATION}.usability", "Usability"),
            _rated(f"{_INNOVATION}.impact", "Impact"),
            _rated(f"{_INNOVATION}.overall", "Overall"),
        ]),
        "comparative_analysis": ComponentSpec("Comparative Analysis", [
            _rated(f"{_COMPARATIVE}.efficiency", "Efficiency"),
            _rated(f"{_COMPARATIVE}.quality", "Quality"),
            _rated(f"{_COMPARATIVE}.completeness", "Completeness"),
            _rated(f"{_COMPARATIVE}.overall", "Overall"),
        ]),
        "rag_highlight": ComponentSpec("RAG Highlight", [
            _rated(f"{_RAG}.highlightAccuracy", "Highlight Accuracy"),
            _rated(f"{_RAG}.navigationFunctionality", "Navigation"),
            _rated(f"{_RAG}.manualHighlight", "Manual Highlight"),
            _rated(f"{_RAG}.contextPreservation", "Context Preservation"),
            _rated(f"{_RAG}.visualClarity", "Visual Clarity"),
            _rated(f"{_RAG}.responseTime", "Response Time"),
            _rated(f"{_RAG}.overall", "Overall", rated=False),
        ]),
    }


# First non-empty value wins
DEFAULT_TITLE_PATHS = [
    "evaluationMetrics.accuracy.metadata.Title Extraction.similarityData.tokenMatching.originalTokens",
    f"{_META}.title.extractedValue",
    f"{_META}.title.referenceValue",
    f"{_META}.title.systemValue",
    "overall.metadata.title.referenceValue",
    "overall.metadata.title.systemValue",
    "metadata.title",
    "paperMetadata.title",
]

DEFAULT_DOI_PATHS = [
    "metadata.doi",
    f"{_META}.doi.extractedValue",
    f"{_META}.doi.referenceValue",
    f"{_META}.doi.systemValue",
    "overall.metadata.doi.referenceValue",
    "paperMetadata.doi",
    "doi",
]

DEFAULT_PAPER_ID_PATHS = [
    "paperId",
    "paper_id",
    "metadata.paperId",
    "metadata.paper_id",
    "paperMetadata.id",
    "paperMetadata.paperId",
]


@dataclass
class ExtractionSchema:
    """Where comments, ratings and paper identifiers live in a record."""

    components: dict[str, ComponentSpec] = field(default_factory=default_components)
    title_paths: list[str] = field(default_factory=lambda: DEFAULT_TITLE_PATHS.copy())
    doi_paths: list[str] = field(default_factory=lambda: DEFAULT_DOI_PATHS.copy())
    paper_id_paths: list[str] = field(default_factory=lambda: DEFAULT_PAPER_ID_PATHS.copy())

    @classmethod
    def load(cls, path: Path | str | None = None) -> ExtractionSchema:
        """Load schema from YAML file or return defaults."""
        if path is None:
            path = config.SCHEMA_FILE
        if path is None:
            # Try common locations
            for candidate in SCHEMA_FILENAMES:
                if Path(candidate).exists():
                    path = candidate
                    break

        if path is None or not Path(path).exists():
            return cls.default()

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExtractionSchema:
        """Create schema from dictionary (e.g., parsed YAML).

        Sections that are left out keep their defaults.
        """
        schema = cls.default()

        components_data = data.get("components")
        if components_data:
            components = {}
            for key, comp in components_data.items():
                dynamic = comp.get("dynamic")
                components[key] = ComponentSpec(
                    name=comp.get("name", key),
                    fields=[
                        FieldSpec(
                            path=f["path"],
                            subfield=f.get("subfield", f["path"].rsplit(".", 1)[-1]),
                            rating_path=f.get("rating_path"),
                        )
                        for f in comp.get("fields", [])
                    ],
                    dynamic=DynamicSpec(**dynamic) if dynamic else None,
                )
            schema.components = components

        papers = data.get("papers", {})
        schema.title_paths = papers.get("title_paths", schema.title_paths)
        schema.doi_paths = papers.get("doi_paths", schema.doi_paths)
        schema.paper_id_paths = papers.get("paper_id_paths", schema.paper_id_paths)
        return schema

    @classmethod
    def default(cls) -> ExtractionSchema:
        return cls()

    def component_name(self, key: str) -> str:
        spec = self.components.get(key)
        return spec.name if spec else key

    def to_dict(self) -> dict[str, Any]:
        components: dict[str, Any] = {}
        for key, spec in self.components.items():
            entry: dict[str, Any] = {"name": spec.name}
            if spec.fields:
                entry["fields"] = [
                    {"path": f.path, "subfield": f.subfield}
                    | ({"rating_path": f.rating_path} if f.rating_path else {})
                    for f in spec.fields
                ]
            if spec.dynamic:
                entry["dynamic"] = {
                    "root": spec.dynamic.root,
                    "comment_key": spec.dynamic.comment_key,
                    "rating_key": spec.dynamic.rating_key,
                    "label_key": spec.dynamic.label_key,
                }
            components[key] = entry

        return {
            "components": components,
            "papers": {
                "title_paths": self.title_paths,
                "doi_paths": self.doi_paths,
                "paper_id_paths": self.paper_id_paths,
            },
        }

    def to_yaml(self) -> str:
        """Serialize schema to YAML."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)


DEFAULT_SCHEMA = ExtractionSchema.default()
