"""Narrative report generator for evaluator feedback.

Instead of dumping tables, this tells a story:
"Do evaluators agree, and whose opinion should carry weight?"
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .pipeline import AnalysisResult
from .sentiment.categories import NEGATIVE, NEUTRAL, POSITIVE


@dataclass
class ReportSection:
    """A section of the report with headline and details."""

    headline: str
    summary: str
    details: list[str] | None = None
    table: list[dict] | None = None


def format_pct(value: float | None) -> str:
    """Format percentage with one decimal."""
    if value is None:
        return "N/A"
    return f"{value:.1f}%"


def format_kappa(value: float | None) -> str:
    if value is None:
        return "N/A"
    return f"{value:.3f}"


def print_section(section: ReportSection, console: Console | None = None) -> None:
    """Print a report section."""
    console = console or Console()
    console.print(f"\n[bold]## {escape(section.headline)}[/bold]")
    console.print()
    console.print(escape(section.summary))

    if section.details:
        console.print()
        for detail in section.details:
            console.print(f"  - {escape(detail)}")

    if section.table:
        console.print()
        table = Table(show_header=True, header_style="bold")
        headers = list(section.table[0].keys())
        for header in headers:
            table.add_column(str(header))
        for row in section.table:
            table.add_row(*(escape(str(row.get(h, ""))) for h in headers))
        console.print(table)


def analyze_reception(result: AnalysisResult) -> ReportSection:
    """How was the system received overall?"""
    summary_stats = result.sentiment
    if not summary_stats.analyzed:
        return ReportSection(headline="No Feedback", summary="No evaluator comments found in the dataset.")

    simple = summary_stats.simple_counts
    positive_pct = 100.0 * summary_stats.ratio(POSITIVE)
    negative_pct = 100.0 * summary_stats.ratio(NEGATIVE)
    overall = summary_stats.overall_sentiment.replace("_", " ")

    if positive_pct > 60:
        headline = f"Evaluators are largely positive: {format_pct(positive_pct)} of comments"
    elif negative_pct > 60:
        headline = f"Evaluators are largely critical: {format_pct(negative_pct)} of comments"
    else:
        headline = f"Mixed reception: overall {overall}"

    summary = (
        f"{summary_stats.analyzed:,} comments from {result.statistics.unique_evaluators:,} evaluators "
        f"across {result.evaluation_count:,} evaluations. "
        f"{simple[POSITIVE]:,} positive, {simple[NEUTRAL]:,} neutral, {simple[NEGATIVE]:,} negative "
        f"(average score {summary_stats.average_score:.2f})."
    )

    details = []
    if summary_stats.top_positive_words:
        words = ", ".join(word for word, _ in summary_stats.top_positive_words[:5])
        details.append(f"Praise centers on: {words}")
    if summary_stats.top_negative_words:
        words = ", ".join(word for word, _ in summary_stats.top_negative_words[:5])
        details.append(f"Criticism centers on: {words}")
    for theme, count, pct in result.themes.ranked[:3]:
        if count:
            details.append(f"Theme {theme}: {count} comments ({format_pct(pct)})")

    table = [
        {
            "component": result.statistics.component_names.get(component, component),
            "comments": stats.analyzed,
            "positive": format_pct(100.0 * stats.ratio(POSITIVE)),
            "negative": format_pct(100.0 * stats.ratio(NEGATIVE)),
            "overall": stats.overall_sentiment,
        }
        for component, stats in result.component_sentiment.items()
    ]

    return ReportSection(headline=headline, summary=summary, details=details or None, table=table or None)


def analyze_reliability(result: AnalysisResult) -> ReportSection:
    """Is the feedback statistically reliable?"""
    kappa = result.kappa
    if not kappa.is_sufficient:
        return ReportSection(
            headline="Not enough overlap for Fleiss' Kappa",
            summary=(
                "No paper component was commented on by two or more evaluators, "
                "so inter-rater reliability can't be estimated."
            ),
        )

    headline = f"Fleiss' Kappa {format_kappa(kappa.kappa)}: {kappa.interpretation.lower()}"
    summary = (
        f"Computed over {kappa.units:,} paper components rated by {kappa.ratings:,} evaluator judgements. "
        f"Observed agreement {kappa.observed_agreement}% against {kappa.expected_agreement}% expected by chance."
    )
    details = [kappa.formula]
    details += [
        f"{label}: {format_pct(100.0 * share)} of judgements"
        for label, share in kappa.category_proportions.items()
    ]
    return ReportSection(headline=headline, summary=summary, details=details)


def analyze_paper_agreement(result: AnalysisResult) -> ReportSection:
    """Do evaluators of the same paper agree component by component?"""
    papers = result.papers
    if not result.intersections:
        return ReportSection(
            headline="No paper has more than one evaluator",
            summary=(
                f"{papers.total_papers:,} papers found, each with a single evaluator. "
                f"{papers.missing_title:,} evaluations had no resolvable title."
            ),
        )

    rates = [i.agreement_rate for i in result.intersections.values() if i.total_components]
    average = sum(rates) / len(rates) if rates else None

    headline = f"{papers.papers_with_multiple_evaluators:,} papers have multiple evaluators"
    summary = (
        f"Of {papers.total_papers:,} papers, {papers.papers_with_multiple_evaluators:,} were assessed by "
        f"two or more evaluators. Average component agreement on those papers: {format_pct(average)}."
    )

    details = []
    if papers.missing_title:
        details.append(f"{papers.missing_title:,} evaluations had no resolvable paper title and were skipped")
    if papers.unattached_comments:
        details.append(f"{papers.unattached_comments:,} comments could not be matched to a paper")

    table = [
        {
            "paper": intersection.title[:50],
            "evaluators": intersection.evaluator_count,
            "components": intersection.total_components,
            "agreed": intersection.agreement_count,
            "agreement": f"{intersection.agreement_rate}%",
        }
        for intersection in sorted(
            result.intersections.values(), key=lambda i: i.evaluator_count, reverse=True
        )[:15]
    ]
    return ReportSection(headline=headline, summary=summary, details=details or None, table=table)


def analyze_consensus(result: AnalysisResult) -> ReportSection:
    """Where do the most qualified evaluators agree?"""
    consensus = result.expert_consensus
    if not consensus.sufficient:
        return ReportSection(
            headline="Too little expert feedback for consensus",
            summary=(
                f"{consensus.total_expert_comments} comments from expert or advanced evaluators. "
                f"{consensus.message}."
            ),
        )

    headline = (
        f"Experts reach consensus on {len(consensus.findings)} components"
        if consensus.has_consensus
        else "Experts do not converge on any component"
    )
    summary = (
        f"{consensus.total_expert_comments:,} comments from {consensus.expert_count:,} expert or advanced "
        f"evaluators. {consensus.interpretation}"
    )
    return ReportSection(
        headline=headline,
        summary=summary,
        details=[f.message for f in consensus.findings] or None,
    )


def analyze_expertise(result: AnalysisResult) -> ReportSection:
    """Do experts and novices see the same strengths and weaknesses?"""
    expertise = result.expertise
    if not expertise.preferences:
        return ReportSection(headline="No Expertise Data", summary="No comments could be attributed to a tier.")

    cross = expertise.cross_tier
    if cross is None:
        headline = "Only one expertise tier present"
    elif cross.divergence_zone:
        headline = f"Tiers diverge on {len(cross.divergence_zone)} components"
    else:
        headline = "All expertise tiers agree"

    summary = expertise.interpretation
    details = []
    if cross is not None:
        details.append(f"Cross-tier agreement: {cross.agreement_rate}% of comparable components")
        if cross.agreement_zone:
            names = ", ".join(cross.components[c].name for c in cross.agreement_zone)
            details.append(f"Agreement zone: {names}")
        if cross.divergence_zone:
            names = ", ".join(cross.components[c].name for c in cross.divergence_zone)
            details.append(f"Divergence zone: {names}")

    table = []
    for tier, prefs in expertise.preferences.items():
        favorite = prefs.favorite[1].name if prefs.favorite else "-"
        concern = prefs.concern[1].name if prefs.concern else "-"
        table.append({"tier": tier, "comments": prefs.total_comments, "favorite": favorite, "concern": concern})

    return ReportSection(headline=headline, summary=summary, details=details or None, table=table)


def analyze_component_agreement(result: AnalysisResult) -> ReportSection:
    """Which components do evaluators agree on most?"""
    rated = [c for c in result.component_inter_rater.values() if c.has_inter_rater]
    if not rated:
        return ReportSection(
            headline="No component has overlapping evaluators",
            summary="Inter-rater agreement needs two evaluators commenting on the same component of a paper.",
        )

    rated.sort(key=lambda c: c.agreement_rate, reverse=True)
    best, worst = rated[0], rated[-1]
    headline = f"Highest agreement on {best.name} ({best.agreement_rate}%)"
    summary = f"Agreement measured on {len(rated)} components with overlapping evaluators."
    if worst is not best:
        summary += f" Lowest agreement on {worst.name} ({worst.agreement_rate}%)."

    table = [
        {
            "component": c.name,
            "papers": c.papers_analyzed,
            "agreed": c.agreement_count,
            "agreement": f"{c.agreement_rate}%",
        }
        for c in rated
    ]
    return ReportSection(headline=headline, summary=summary, table=table)


def analyze_comment_length(result: AnalysisResult) -> ReportSection:
    """Do evaluators who write more feel differently?"""
    patterns = result.length_patterns
    buckets = [b for b in patterns.buckets.values() if b.total]
    if not buckets:
        return ReportSection(headline="No comment length data", summary="No comment has any words to count.")

    largest = max(buckets, key=lambda b: b.total)
    total = sum(b.total for b in buckets)
    headline = f"Most comments are {largest.key} ({largest.total:,} of {total:,})"
    summary = "Sentiment split by how many words evaluators wrote."
    table = [
        {
            "length": bucket.label,
            "comments": bucket.total,
            "positive": format_pct(100.0 * bucket.ratio(POSITIVE)),
            "negative": format_pct(100.0 * bucket.ratio(NEGATIVE)),
            "avg score": f"{bucket.average_score:.2f}",
        }
        for bucket in buckets
    ]
    return ReportSection(headline=headline, summary=summary, details=patterns.insights or None, table=table)


def analyze_themes(result: AnalysisResult) -> ReportSection:
    """What do evaluators talk about, and how do they feel about it?"""
    frequency = result.theme_frequency
    if not frequency:
        return ReportSection(headline="No recurring themes", summary="No comment mentions a theme keyword.")

    top = next(iter(frequency.values()))
    headline = f"{top.theme} is the most discussed theme ({format_pct(top.percentage)} of comments)"
    summary = f"{len(frequency)} themes found across {result.themes.total:,} comments."
    table = [
        {
            "theme": theme.theme,
            "comments": theme.count,
            "positive": theme.sentiments[POSITIVE],
            "negative": theme.sentiments[NEGATIVE],
            "top component": theme.components[0][1] if theme.components else "-",
        }
        for theme in frequency.values()
    ]
    return ReportSection(headline=headline, summary=summary, table=table)


def build_report(result: AnalysisResult) -> dict[str, list[ReportSection]]:
    """Report sections grouped under their part headings."""
    return {
        "THE BIG PICTURE": [
            analyze_reception(result),
            analyze_reliability(result),
        ],
        "AGREEMENT": [
            analyze_paper_agreement(result),
            analyze_component_agreement(result),
        ],
        "EXPERTISE": [
            analyze_consensus(result),
            analyze_expertise(result),
        ],
        "FEEDBACK PATTERNS": [
            analyze_themes(result),
            analyze_comment_length(result),
        ],
    }


def generate_report(result: AnalysisResult, console: Console | None = None) -> None:
    """Generate the full narrative report."""
    console = console or Console()

    console.print("=" * 70)
    console.print("EVALUATOR FEEDBACK ANALYSIS: Do evaluators agree?")
    console.print("=" * 70)
    console.print(
        f"\nData: {result.evaluation_count:,} evaluations, {len(result.comments):,} comments, "
        f"{result.papers.total_papers:,} papers"
    )

    for part, sections in build_report(result).items():
        console.print("\n" + "=" * 70)
        console.print(part)
        console.print("=" * 70)
        for section in sections:
            print_section(section, console)

    console.print()
