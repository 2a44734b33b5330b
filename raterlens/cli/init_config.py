"""Write the default extraction schema as an editable YAML file.

Given a sample corpus, also reports how many comments each component
yields, so empty paths are easy to spot before customizing.
"""

from __future__ import annotations

from pathlib import Path

from ..corpus import load_evaluations
from ..extractors.comments import extract_all_comments
from ..schema import ExtractionSchema

HEADER = """# raterlens.yaml - Extraction schema for evaluator feedback
# Generated by: raterlens init
#
# Each component lists the dotted paths where comment text lives in an
# evaluation record, with an optional rating path. Papers are matched by
# the first non-empty title found under papers.title_paths.

"""


def component_coverage(schema: ExtractionSchema, corpus: Path) -> dict[str, int]:
    """Comments found per component in a sample corpus."""
    comments = extract_all_comments(load_evaluations(corpus), schema)
    coverage = dict.fromkeys(schema.components, 0)
    for comment in comments:
        coverage[comment.component] += 1
    return coverage


def init_config(output: Path | None = None, corpus: Path | None = None) -> str:
    """Initialize raterlens.yaml with the default schema.

    Args:
        output: Output file path (defaults to raterlens.yaml in cwd)
        corpus: Optional evaluation file to check the schema against

    Returns:
        YAML schema string
    """
    if output is None:
        output = Path.cwd() / "raterlens.yaml"

    schema = ExtractionSchema.default()

    if corpus is not None:
        print(f"Checking schema against {corpus}...")
        coverage = component_coverage(schema, corpus)
        for key, count in coverage.items():
            marker = "" if count else "  (no comments found)"
            print(f"  - {schema.component_name(key)}: {count}{marker}")

    full_content = HEADER + schema.to_yaml()

    print(f"\nWriting schema to {output}")
    with open(output, "w") as f:
        f.write(full_content)

    print(f"\nGenerated {len(schema.components)} components.")
    return full_content
