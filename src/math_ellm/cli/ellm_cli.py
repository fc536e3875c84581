"""
CLI for indexing a math Q&A dataset and answering questions against it.

Commands:
1. demo  - index the dataset and answer a fixed set of sample questions
2. ask   - answer one or more questions given on the command line
3. chat  - interactive question loop
4. stats - index the dataset and print indexing statistics
"""

import argparse
import json
import logging
import os
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

import coloredlogs
from pydantic import ValidationError
from rich.console import Console

from math_ellm.config import IndexingSettings, settings_provider
from math_ellm.data_processing.load_dataset import (
    MathQADataset,
    generate_sample_dataset,
    load_dataset,
)
from math_ellm.encoding.primes import PrimeSource
from math_ellm.encoding.term_encoder import TermEncoder
from math_ellm.retrieval.answer_engine import AnswerEngine, IndexingStats
from math_ellm.utils.formatting import format_answer, indexing_stats_table

# Configure logger
logger = logging.getLogger(__name__)
coloredlogs.install(
    level="INFO",
    logger=logger,
    fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

DEMO_QUESTIONS = [
    "What is the derivative of x^3?",
    "How do I solve the quadratic equation ax^2 + bx + c = 0?",
    "Find the integral of sin(x) with respect to x.",
    "What is the formula for the area of a circle?",
    "How do I calculate the limit of (1-cos(x))/x^2 as x approaches 0?",
]


def configure_logging(level: str) -> None:
    """Apply one log level to every math_ellm logger and its console handler."""
    level = level.upper()
    logging.getLogger("math_ellm").setLevel(level)
    for name in list(logging.root.manager.loggerDict):
        if name.startswith("math_ellm."):
            module_logger = logging.getLogger(name)
            coloredlogs.install(
                level=level,
                logger=module_logger,
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            )
            module_logger.setLevel(level)


def resolve_settings(args) -> IndexingSettings:
    """
    Settings from the environment, overridden by any CLI flags given.

    Raises:
        ValidationError: If a flag is outside the range the settings allow
    """
    settings = settings_provider.get_settings(IndexingSettings)
    overrides = {
        "dataset_path": Path(args.dataset) if args.dataset else None,
        "sample_size": args.sample_size,
        "similarity_threshold": args.threshold,
        "match_limit": args.limit,
        "log_level": args.log_level,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if args.progress:
        overrides["show_progress"] = True
    return IndexingSettings(**{**settings.model_dump(), **overrides})


def load_corpus(settings: IndexingSettings) -> MathQADataset:
    dataset_path = settings.resolve_dataset_path()
    if dataset_path is None:
        return generate_sample_dataset(settings.sample_size)
    return load_dataset(dataset_path)


def build_engine(settings: IndexingSettings) -> Tuple[AnswerEngine, IndexingStats]:
    """Create an engine from settings and index the configured dataset."""
    encoder = TermEncoder(PrimeSource(sieve_limit=settings.sieve_limit))
    engine = AnswerEngine(
        encoder=encoder,
        threshold=settings.similarity_threshold,
        limit=settings.match_limit,
    )
    dataset = load_corpus(settings)
    logger.info(f"Indexing {len(dataset)} records...")
    stats = engine.index_corpus(
        dataset.data,
        show_progress=settings.show_progress,
        progress_every=settings.progress_every,
    )
    return engine, stats


def demo_command(args, settings: IndexingSettings) -> None:
    """Index the dataset and answer the demo questions."""
    configure_logging(settings.log_level)
    console = Console()

    console.print("[bold blue]" + "=" * 38 + "[/bold blue]")
    console.print(
        "[bold blue]MathStackELLM - Prime Encoding for Mathematical Reasoning"
        "[/bold blue]"
    )
    console.print("[bold blue]" + "=" * 38 + "[/bold blue]\n")

    engine, stats = build_engine(settings)

    for i, question in enumerate(DEMO_QUESTIONS, 1):
        start_time = time.perf_counter()
        result = engine.answer_question(question)
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        console.print(format_answer(result, i, elapsed_ms=elapsed_ms), markup=False)

    console.print("\n[bold green]=== Index Statistics ===[/bold green]")
    console.print(indexing_stats_table(stats), markup=False)


def ask_command(args, settings: IndexingSettings) -> None:
    """Answer the questions given on the command line."""
    configure_logging(settings.log_level)
    engine, _ = build_engine(settings)

    results = [engine.answer_question(question) for question in args.questions]
    if args.json:
        payload = [result.model_dump(exclude_none=True) for result in results]
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    for i, result in enumerate(results, 1):
        print(format_answer(result, i))


def chat_command(args, settings: IndexingSettings) -> None:
    """Interactive question loop over the indexed dataset."""
    configure_logging(settings.log_level)
    console = Console()

    console.print("[bold blue]Indexing math Q&A dataset...[/bold blue]")
    engine, stats = build_engine(settings)

    console.print("\n[bold green]Welcome to Math-ELLM Chat![/bold green]")
    console.print(
        f"[bold white]{stats.question_patterns} question patterns, "
        f"{stats.unique_expressions} expressions indexed[/bold white]"
    )
    console.print(
        "Type [bold red]exit[/bold red], [bold red]quit[/bold red], or "
        "[bold red]q[/bold red] to end the session"
    )
    console.print("Type [bold yellow]clear[/bold yellow] to clear the screen\n")

    answered = 0
    while True:
        try:
            console.print("[bold cyan]You:[/bold cyan]", end=" ")
            user_input = input().strip()
        except (KeyboardInterrupt, EOFError):
            console.print("\n[bold green]Goodbye![/bold green]")
            break

        if user_input.lower() in ["exit", "quit", "q"]:
            console.print("\n[bold green]Goodbye![/bold green]")
            break

        if user_input.lower() == "clear":
            os.system("cls" if os.name == "nt" else "clear")
            console.print("[bold green]Welcome to Math-ELLM Chat![/bold green]")
            continue

        if not user_input:
            continue

        answered += 1
        result = engine.answer_question(user_input)
        console.print(format_answer(result, answered), markup=False)


def stats_command(args, settings: IndexingSettings) -> None:
    """Index the dataset and print statistics."""
    configure_logging(settings.log_level)
    _, stats = build_engine(settings)

    print("\n=== Index Statistics ===")
    print(indexing_stats_table(stats))


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--dataset", help="Dataset file (.json, .jsonl, .yaml); default: sample data"
    )
    common.add_argument(
        "--sample-size", type=int, help="Records in the generated sample dataset"
    )
    common.add_argument(
        "--threshold", type=float, help="Minimum Jaccard similarity for a match"
    )
    common.add_argument("--limit", type=int, help="Maximum matches per query")
    common.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")
    common.add_argument(
        "--progress", action="store_true", help="Show a progress bar while indexing"
    )

    parser = argparse.ArgumentParser(
        description="Prime-encoded math Q&A retrieval CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser(
        "demo", parents=[common], help="Answer the built-in demo questions"
    )

    ask_parser = subparsers.add_parser(
        "ask", parents=[common], help="Answer questions given as arguments"
    )
    ask_parser.add_argument("questions", nargs="+", help="Question text")
    ask_parser.add_argument("--json", action="store_true", help="Print answers as JSON")

    subparsers.add_parser("chat", parents=[common], help="Interactive question loop")
    subparsers.add_parser("stats", parents=[common], help="Show indexing statistics")
    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    commands = {
        "demo": demo_command,
        "ask": ask_command,
        "chat": chat_command,
        "stats": stats_command,
    }
    if args.command not in commands:
        parser.print_help()
        sys.exit(1)

    try:
        settings = resolve_settings(args)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        parser.error(f"invalid settings: {errors}")

    commands[args.command](args, settings)


if __name__ == "__main__":
    main()
