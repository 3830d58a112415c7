from __future__ import annotations

import argparse
import asyncio
import json
import logging
import string
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from quizcache.config import AppConfig, default_app_config
from quizcache.errors import GenerationFailure, MalformedResponse, NoActiveQuestion
from quizcache.evaluator import AnswerEvaluator
from quizcache.generator import ChatCompletionGenerator
from quizcache.session import QuizSession
from quizcache.store import QuestionStore
from quizcache.utils.logging import setup_logging

LETTERS = string.ascii_uppercase


def resolve_choice(reply: str, options: Sequence[str]) -> str:
    """Map a typed reply to option text.

    A single letter selects the option at that position; anything else is
    taken as the option text itself.
    """
    reply = reply.strip()
    if len(reply) == 1 and reply.upper() in LETTERS[: len(options)]:
        return options[LETTERS.index(reply.upper())]
    return reply


def format_question(index: int, question: str, options: Sequence[str]) -> str:
    lines = [f"Question {index + 1}:", question, ""]
    lines.extend(f"  {LETTERS[i]}) {opt}" for i, opt in enumerate(options))
    return "\n".join(lines)


async def run_fetch(cfg: AppConfig, indices: List[int], output: Optional[Path], logger: logging.Logger) -> int:
    async with ChatCompletionGenerator(cfg.generator) as generator:
        store = QuestionStore(generator, coalesce=cfg.store.coalesce)
        records = {}
        for index in indices:
            try:
                record = await store.get_or_fetch(index)
            except (GenerationFailure, MalformedResponse) as e:
                print(f"Error: question {index}: {e}")
                for detail in getattr(e, "errors", []):
                    print(f"  - {detail}")
                return 1
            records[str(index)] = record.to_dict()

    text = json.dumps(records, indent=2, ensure_ascii=False)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {len(records)} questions to {output}")
        logger.info("Wrote %d questions to %s", len(records), output)
    else:
        print(text)
    return 0


async def run_play(
    cfg: AppConfig,
    start: int,
    count: int,
    input_fn: Callable[[str], str] = input,
) -> int:
    score = 0
    answered = 0
    async with ChatCompletionGenerator(cfg.generator) as generator:
        store = QuestionStore(generator, coalesce=cfg.store.coalesce)
        session = QuizSession(store, AnswerEvaluator(store))
        for index in range(start, start + count):
            await session.load(index)
            if session.error is not None:
                print(f"Error: {session.error}")
                return 1
            print(format_question(index, session.question, session.options))
            try:
                reply = input_fn("Your answer: ")
            except EOFError:
                print()
                break
            try:
                result = session.check_answer(resolve_choice(reply, session.options))
            except NoActiveQuestion as e:
                print(f"Error: {e}")
                return 1
            answered += 1
            score += int(result.is_correct)
            print("Correct!" if result.is_correct else "Incorrect.")
            print(result.explanation)
            print()
    print(f"Score: {score}/{answered}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="quizcache - generated multiple-choice questions with a per-index cache",
        epilog="""Examples:
  # Generate questions 0-2 and print them as JSON
  quizcache fetch 0 1 2

  # Save generated questions to a file
  quizcache fetch 0 1 --output results/questions.json

  # Play five questions interactively using a YAML config
  quizcache play --count 5 --config configs/quiz.yaml
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", "-c", default=None, help="Config file (.json or .yaml); defaults from environment if omitted")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    fetch_parser = subparsers.add_parser("fetch", help="Generate questions for the given indices")
    fetch_parser.add_argument("indices", type=int, nargs="+", help="Question indices (non-negative)")
    fetch_parser.add_argument("--output", "-o", help="Output file path for questions (JSON format)")

    play_parser = subparsers.add_parser("play", help="Answer generated questions interactively")
    play_parser.add_argument("--start", type=int, default=0, help="First question index (default: 0)")
    play_parser.add_argument("--count", type=int, default=5, help="Number of questions (default: 5)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        cfg = AppConfig.from_file(args.config) if args.config else default_app_config()
    except FileNotFoundError:
        print(f"Error: Config file '{args.config}' not found")
        return 1
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON format in '{args.config}': {e}")
        return 1
    except ValueError as e:
        print(f"Error: Invalid config '{args.config}': {e}")
        return 1

    level = "DEBUG" if args.verbose else cfg.logging.level
    logger = setup_logging(cfg.logging.log_dir, cfg.logging.filename, level, cfg.logging.structured)

    try:
        if args.command == "fetch":
            if any(i < 0 for i in args.indices):
                print("Error: indices must be non-negative")
                return 1
            output = Path(args.output) if args.output else None
            return asyncio.run(run_fetch(cfg, args.indices, output, logger))

        if args.command == "play":
            if args.start < 0 or args.count < 1:
                print("Error: --start must be >= 0 and --count >= 1")
                return 1
            return asyncio.run(run_play(cfg, args.start, args.count))

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        logger.info("Interrupted by user (KeyboardInterrupt)")
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
