"""Main CLI entry point for raterlens - evaluator feedback reliability analysis."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .. import config
from .init_config import init_config


def setup_logging(verbose: bool = False) -> None:
    """Log to stderr, or to RATERLENS_LOG_FILE when set."""
    handlers: list[logging.Handler] = (
        [logging.FileHandler(config.LOG_FILE, mode="a")] if config.LOG_FILE else [logging.StreamHandler()]
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.LOG_LEVEL,
        format="%(asctime)s | %(levelname)s | %(message)s",
        handlers=handlers,
    )


def _run(args: argparse.Namespace):
    # Import here to keep `raterlens init` and --help fast
    from ..corpus import Corpus
    from ..pipeline import run_analysis
    from ..schema import ExtractionSchema

    try:
        corpus = Corpus.load(args.file)
    except (OSError, ValueError) as e:
        print(f"Error: cannot load {args.file}: {e}", file=sys.stderr)
        sys.exit(1)
    return run_analysis(corpus, ExtractionSchema.load(args.schema))


def main():
    """Main CLI entry point for raterlens."""
    parser = argparse.ArgumentParser(
        prog="raterlens",
        description="Reliability and consensus analysis for evaluator feedback",
        epilog="Run 'raterlens <command> --help' for more information on a command.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init command - write default schema
    init_parser = subparsers.add_parser(
        "init",
        help="Generate raterlens.yaml with the default extraction schema",
        description="Write the default extraction schema as YAML, optionally checked against a corpus.",
    )
    init_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (default: raterlens.yaml in current directory)",
    )
    init_parser.add_argument(
        "--corpus",
        "-c",
        type=Path,
        default=None,
        help="Evaluation file to report per-component comment counts for",
    )

    def add_corpus_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "file",
            type=Path,
            nargs="?",
            default=config.DATA_FILE,
            help=f"Evaluation JSON file (default: {config.DATA_FILE})",
        )
        sub.add_argument(
            "--schema",
            type=Path,
            default=None,
            help="Extraction schema YAML (default: raterlens.yaml if present)",
        )

    # report command - narrative report
    report_parser = subparsers.add_parser(
        "report",
        help="Generate narrative report (recommended)",
        description="Generate a narrative report answering: Do evaluators agree?",
    )
    add_corpus_args(report_parser)

    # analyze command - raw tables
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Run table queries over extracted comments",
        description="Load comments into DuckDB and print raw tables.",
    )
    add_corpus_args(analyze_parser)
    analyze_parser.add_argument(
        "--query",
        "-q",
        type=str,
        default=None,
        help="Run specific query: components, tiers, evaluators, ratings (default: run all)",
    )

    # kappa command - reliability only
    kappa_parser = subparsers.add_parser(
        "kappa",
        help="Print Fleiss' Kappa for the corpus",
        description="Compute Fleiss' Kappa over (paper, component) units.",
    )
    add_corpus_args(kappa_parser)
    kappa_parser.add_argument("--json", action="store_true", help="Print as JSON")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    setup_logging(args.verbose)

    if args.command == "init":
        init_config(args.output, args.corpus)

    elif args.command == "report":
        from ..report import generate_report

        generate_report(_run(args))

    elif args.command == "analyze":
        from ..analyze import QUERIES, get_connection, run_all

        if args.query is not None and args.query not in QUERIES:
            print(f"Unknown query: {args.query}. Choose from: {', '.join(QUERIES)}", file=sys.stderr)
            sys.exit(1)

        result = _run(args)
        con = get_connection(result.comments)
        if args.query is None:
            run_all(con)
        else:
            QUERIES[args.query](con)
        con.close()

    elif args.command == "kappa":
        kappa = _run(args).kappa
        if args.json:
            print(json.dumps({
                "kappa": kappa.kappa,
                "interpretation": kappa.interpretation,
                "observed_agreement": kappa.observed_agreement,
                "expected_agreement": kappa.expected_agreement,
                "units": kappa.units,
                "ratings": kappa.ratings,
                "category_proportions": kappa.category_proportions,
            }, indent=2))
        else:
            print(f"Fleiss' Kappa: {kappa.kappa if kappa.kappa is not None else 'N/A'} ({kappa.interpretation})")
            if kappa.is_sufficient:
                print(f"Units: {kappa.units}, ratings: {kappa.ratings}")
                print(f"Observed agreement: {kappa.observed_agreement}%, expected: {kappa.expected_agreement}%")

    else:
        print(f"Unknown command: {args.command}")
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
