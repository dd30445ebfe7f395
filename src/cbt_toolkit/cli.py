"""
Command-line entry point.

Commands:
    plan     Show total / passing marks for a pool file and selection counts
    bank     List question bank questions
    preview  Ask the exam service for one random draw from a pool file
    join     Join an exam as a student
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence

from cbt_toolkit import __version__
from cbt_toolkit.api import BankFilters, ExamServiceClient, ServiceError, load_client_config
from cbt_toolkit.builder import (
    PreviewError,
    PreviewRequester,
    SelectionBoundsError,
    plan_marks,
)
from cbt_toolkit.core.models import DerivedMarks, QuestionPool, QuestionType, SelectionPlan
from cbt_toolkit.core.schemas import ValidationError
from cbt_toolkit.core.utils import load_pool_json
from cbt_toolkit.student import JoinStatus, join_with_retake
from cbt_toolkit.utils.logging_utils import configure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID = 2


def _count(value: str) -> int:
    try:
        count = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if count < 0:
        raise argparse.ArgumentTypeError(f"cannot be negative: {count}")
    return count


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cbt-toolkit",
        description="Exam building and joining tools for the CBT exam service.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="JSON settings file (base_url, token, ...)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    plan = sub.add_parser("plan", help="Show marks for a pool and selection counts")
    plan.add_argument("pool", type=Path, help="Pool JSON file")
    plan.add_argument("--objective", type=_count, help="Objective questions drawn per student")
    plan.add_argument("--theory", type=_count, help="Theory questions drawn per student")
    plan.add_argument("--passing", type=_count, help="Override passing marks")

    bank = sub.add_parser("bank", help="List question bank questions")
    bank.add_argument("--subject", default="")
    bank.add_argument("--class", dest="class_id", default="")
    bank.add_argument("--type", dest="question_type", choices=["objective", "theory"])
    bank.add_argument("--search", default="")
    bank.add_argument("--limit", type=int, default=100)

    preview = sub.add_parser("preview", help="Request one random draw from a pool")
    preview.add_argument("pool", type=Path, help="Pool JSON file")
    preview.add_argument("--objective", type=_count)
    preview.add_argument("--theory", type=_count)

    join = sub.add_parser("join", help="Join an exam by code")
    join.add_argument("code")
    join.add_argument("--retake", action="store_true", help="Start a new attempt if allowed")

    return parser


def _load_plan(args: argparse.Namespace) -> tuple[QuestionPool, SelectionPlan]:
    pool, plan = load_pool_json(args.pool)
    return pool, SelectionPlan(
        objective=plan.objective if args.objective is None else args.objective,
        theory=plan.theory if args.theory is None else args.theory,
    )


def format_marks(marks: DerivedMarks) -> str:
    """Human-readable marks summary, flagging estimated types."""
    lines = []
    for question_type in QuestionType:
        contribution = marks.contribution(question_type)
        line = f"{question_type.value:<10} {contribution.value:>4}"
        if contribution.is_estimate:
            line += f"  (estimate, average {contribution.average:.2f} per question)"
        lines.append(line)
    total = f"~{marks.total_marks}" if marks.is_estimate else str(marks.total_marks)
    lines.append(f"{'Total':<10} {total:>4}")
    lines.append(f"{'Passing':<10} {marks.passing_marks:>4}")
    if marks.is_estimate:
        lines.append(
            "Warning: questions have inconsistent marks; students drawing "
            "different questions may get different totals."
        )
    return "\n".join(lines)


def _cmd_plan(args: argparse.Namespace) -> int:
    pool, plan = _load_plan(args)
    marks = plan_marks(pool, plan)
    if args.passing is not None:
        marks = marks.with_passing_marks(args.passing)
    print(format_marks(marks))
    return EXIT_OK


async def _cmd_bank(args: argparse.Namespace) -> int:
    filters = BankFilters(
        subject=args.subject,
        class_id=args.class_id,
        question_type=QuestionType.parse(args.question_type) if args.question_type else None,
        search=args.search,
        limit=args.limit,
    )
    async with ExamServiceClient(load_client_config(args.config)) as client:
        questions = await client.list_questions_for_selection(filters)
    for q in questions:
        print(f"{q.id}  {q.question_type.value:<9} {q.marks:>2}  {q.text}")
    logger.info(f"{len(questions)} question(s)")
    return EXIT_OK


async def _cmd_preview(args: argparse.Namespace) -> int:
    pool, plan = _load_plan(args)
    async with ExamServiceClient(load_client_config(args.config)) as client:
        sample = await PreviewRequester(client).request_preview(pool, plan)
    for question_type in QuestionType:
        for q in sample.for_type(question_type):
            print(f"{question_type.value:<9} {q.marks:>2}  {q.text}")
    print(f"Sample marks: {sample.total_marks}")
    return EXIT_OK


def _confirm_retake(_outcome) -> bool:
    answer = input("Retakes are allowed. Start a new attempt? [y/N] ")
    return answer.strip().lower() in ("y", "yes")


async def _cmd_join(args: argparse.Namespace) -> int:
    confirm = (lambda _outcome: True) if args.retake else _confirm_retake
    async with ExamServiceClient(load_client_config(args.config)) as client:
        outcome = await join_with_retake(client, args.code, confirm)
    print(outcome.message)
    if outcome.joined:
        title = outcome.exam.get("title", "")
        print(f"{title}: {len(outcome.questions)} question(s)")
        return EXIT_OK
    return EXIT_ERROR if outcome.status is JoinStatus.COMPLETED_BLOCKED else EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.command == "plan":
            return _cmd_plan(args)
        if args.command == "bank":
            return asyncio.run(_cmd_bank(args))
        if args.command == "preview":
            return asyncio.run(_cmd_preview(args))
        return asyncio.run(_cmd_join(args))
    except SelectionBoundsError as e:
        logger.error(f"Invalid selection: {e}")
        return EXIT_INVALID
    except (ValidationError, FileNotFoundError) as e:
        logger.error(f"Invalid pool file: {e}")
        return EXIT_INVALID
    except ServiceError as e:
        logger.error(e.message)
        return EXIT_ERROR
    except (PreviewError, ValueError) as e:
        logger.error(str(e))
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
