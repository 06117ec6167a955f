"""Command-line entrypoint: lint lessons, keep ToC blocks in sync."""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from lesson_kit.config.settings import LessonKitConfig, LintSettings, find_config
from lesson_kit.corpus.corpus import LessonCorpus
from lesson_kit.lint.diagnostic import has_errors
from lesson_kit.lint.engine import Linter
from lesson_kit.lint.rules import default_registry
from lesson_kit.observability.base import (
    LoggingMetricsHook,
    MetricsHook,
    NoOpMetricsHook,
)
from lesson_kit.parsers.markdown_parser import MarkdownParser
from lesson_kit.parsers.models import Lesson
from lesson_kit.toc.generator import update_toc
from lesson_kit.toc.slug import slugify

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lesson-kit", description="Parse, outline and lint markdown lessons"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="More logging (-v info, -vv debug and metrics)",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_lint = sub.add_parser("lint", help="Check lesson structure")
    p_lint.add_argument("paths", nargs="+", help="Lesson files or directories")
    p_lint.add_argument("-c", "--config", default=None, help="Path to lesson-kit.yaml")
    p_lint.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="RULE",
        help="Disable a rule (repeatable)",
    )

    p_toc = sub.add_parser("toc", help="Regenerate ToC blocks")
    p_toc.add_argument("paths", nargs="+", help="Lesson files or directories")
    p_toc.add_argument("-c", "--config", default=None, help="Path to lesson-kit.yaml")
    mode = p_toc.add_mutually_exclusive_group()
    mode.add_argument("--write", action="store_true", help="Rewrite files in place")
    mode.add_argument(
        "--check", action="store_true", help="Exit 1 when a ToC is out of date"
    )
    p_toc.add_argument(
        "--insert", action="store_true", help="Add a ToC block where there is none"
    )

    p_slug = sub.add_parser("slug", help="Print the anchor slug of heading text")
    p_slug.add_argument("headings", nargs="+")

    sub.add_parser("rules", help="List lint rules")
    return parser


def _configure_logging(verbosity: int) -> MetricsHook:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    return LoggingMetricsHook() if verbosity >= 2 else NoOpMetricsHook()


def _load_config(explicit: str | None, paths: list[str]) -> LessonKitConfig:
    if explicit:
        return LessonKitConfig.load(explicit)
    found = find_config(paths[0])
    if found is not None:
        return LessonKitConfig.load(found)
    return LessonKitConfig()


def _lesson_files(paths: list[str]) -> list[Path]:
    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(sorted(p for p in path.glob("*.md") if p.is_file()))
        elif path.is_file():
            files.append(path)
        else:
            raise FileNotFoundError(f"No such lesson file or directory: '{raw}'")
    return files


def _cmd_lint(args: argparse.Namespace, metrics_hook: MetricsHook) -> int:
    config = _load_config(args.config, args.paths)
    if args.disable:
        config = LessonKitConfig(
            toc=config.toc,
            lint=LintSettings(
                disabled_rules=[*config.lint.disabled_rules, *args.disable],
                severity_overrides=config.lint.severity_overrides,
                output_languages=config.lint.output_languages,
            ),
        )
    parser = MarkdownParser(
        output_languages=config.lint.output_languages,
        toc_settings=config.toc,
        metrics_hook=metrics_hook,
    )
    linter = Linter(config=config, metrics_hook=metrics_hook)

    lessons: list[Lesson] = []
    for raw in args.paths:
        path = Path(raw)
        if path.is_dir():
            lessons.extend(LessonCorpus(path, parser=parser).lessons())
        elif path.is_file():
            lessons.append(parser.parse(path))
        else:
            raise FileNotFoundError(f"No such lesson file or directory: '{raw}'")

    diagnostics = linter.lint_lessons(lessons)
    for diagnostic in diagnostics:
        print(diagnostic.format())

    errors = sum(1 for d in diagnostics if d.severity == "error")
    warnings = len(diagnostics) - errors
    if diagnostics:
        print(f"{errors} error(s), {warnings} warning(s)", file=sys.stderr)
    return EXIT_FINDINGS if has_errors(diagnostics) else EXIT_OK


def _cmd_toc(args: argparse.Namespace, metrics_hook: MetricsHook) -> int:
    config = _load_config(args.config, args.paths)
    parser = MarkdownParser(
        output_languages=config.lint.output_languages, toc_settings=config.toc
    )
    status = EXIT_OK

    for path in _lesson_files(args.paths):
        text = path.read_text(encoding="utf-8")
        updated = update_toc(
            text, config=config, insert=args.insert, metrics_hook=metrics_hook
        )

        if args.check:
            if updated != text:
                print(f"{path}: ToC is out of date")
                status = EXIT_FINDINGS
            continue

        if args.write:
            if updated != text:
                path.write_text(updated, encoding="utf-8")
                print(f"updated {path}")
            continue

        toc = parser.parse_text(updated, name=path.stem, path=path).toc
        if toc is None or toc.end_line is None:
            print(f"{path}: no ToC block (use --insert to add one)", file=sys.stderr)
            continue
        print("\n".join(updated.splitlines()[toc.start_line - 1 : toc.end_line]))

    return status


def _cmd_slug(args: argparse.Namespace) -> int:
    for heading in args.headings:
        print(slugify(heading))
    return EXIT_OK


def _cmd_rules() -> int:
    for name, rule in default_registry().list().items():
        print(f"{name:<20} {rule.severity:<8} {rule.description}")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    metrics_hook = _configure_logging(args.verbose)

    try:
        if args.cmd == "lint":
            return _cmd_lint(args, metrics_hook)
        if args.cmd == "toc":
            return _cmd_toc(args, metrics_hook)
        if args.cmd == "slug":
            return _cmd_slug(args)
        return _cmd_rules()
    except (FileNotFoundError, KeyError, ValueError, ValidationError) as exc:
        message = exc.args[0] if isinstance(exc, KeyError) and exc.args else exc
        logger.debug("Command failed", exc_info=True)
        print(f"lesson-kit: error: {message}", file=sys.stderr)
        return EXIT_USAGE


def main_entry() -> None:
    sys.exit(main())
