"""CLI entry point for the VizPilot analysis agent."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from vizpilot.errors import VizPilotError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:] when None).

    Returns:
        Parsed namespace with files, focus, provider, model, output_dir,
        questions and verbose.
    """
    parser = argparse.ArgumentParser(
        description="VizPilot — load CSV/Excel files, let an LLM plan and "
        "build charts around a focus, and ask follow-up questions.",
    )
    parser.add_argument(
        "files",
        nargs="+",
        help="Paths to the CSV/XLSX files to analyse.",
    )
    parser.add_argument(
        "--focus",
        required=True,
        help='Analysis focus, e.g. "Find the hero product".',
    )
    parser.add_argument(
        "--provider",
        default=None,
        choices=["openai", "gemini"],
        help="LLM provider (default: $VIZPILOT_PROVIDER or gemini).",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Model name override (uses provider default when omitted).",
    )
    parser.add_argument(
        "--output-dir",
        default="output",
        help="Output directory for the report (default: output).",
    )
    parser.add_argument(
        "--ask",
        dest="questions",
        action="append",
        default=[],
        metavar="QUESTION",
        help="Follow-up question to ask after the analysis (repeatable).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log pipeline progress.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Run one analysis session from the command line.

    Args:
        argv: Optional argument list for testing; uses sys.argv when None.
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Validate that the files exist early, before heavy imports.
    for path in args.files:
        if not os.path.isfile(path):
            print(f"Error: file not found — {path}", file=sys.stderr)
            sys.exit(1)

    try:
        from vizpilot.llm_config import OracleConfig
        from vizpilot.loader import load_file
        from vizpilot.report_generator import generate_report
        from vizpilot.session import AnalysisSession

        # 1. Configure the oracle
        config = OracleConfig.from_env(provider=args.provider, model=args.model)
        session = AnalysisSession(config=config)

        # 2. Load files one at a time
        session.add_datasets(load_file(path) for path in args.files)

        # 3. Run the analysis
        result = session.run(args.focus)

        # 4. Follow-up questions
        for question in args.questions:
            answer = session.ask(question)
            print(f"Q: {question}\nA: {answer}\n")

        # 5. Write the report
        report_path = generate_report(result, args.output_dir, history=session.history)
        print(f"Report saved to: {report_path}")

    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        sys.exit(130)
    except VizPilotError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        sys.exit(1)
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
