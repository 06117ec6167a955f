# toc/generator.py

import logging
from collections.abc import Iterable, Mapping
from time import monotonic

from lesson_kit.config.settings import LessonKitConfig, TocSettings
from lesson_kit.observability import names
from lesson_kit.observability.base import MetricsHook, NoOpMetricsHook
from lesson_kit.parsers.models import Lesson, TocEntry

logger = logging.getLogger(__name__)

TOC_CLOSE = "<!-- /TOC -->"
_TRUE_VALUES = {"1", "true", "yes"}


def _validate_depth(depth_from: int, depth_to: int) -> None:
    if depth_from < 1:
        raise ValueError("depth_from must be >= 1")
    if depth_to > 6:
        raise ValueError("depth_to must be <= 6")
    if depth_from > depth_to:
        raise ValueError("depth_from must be <= depth_to")


def generate_toc(
    lesson: Lesson,
    *,
    depth_from: int = 2,
    depth_to: int = 6,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> list[TocEntry]:
    """Build ToC entries for every section heading within the depth range.

    The lesson title is never listed. Anchors are the section anchors,
    already disambiguated across the whole document.
    """
    start = monotonic()
    _validate_depth(depth_from, depth_to)

    entries = [
        TocEntry(text=section.heading, anchor=section.anchor, level=section.level)
        for section in lesson.sections
        if depth_from <= section.level <= depth_to
    ]

    elapsed_ms = 1000 * (monotonic() - start)
    metrics_hook.record_latency(names.TOC_GENERATE_DURATION, elapsed_ms)
    return entries


def render_toc(
    entries: Iterable[TocEntry],
    *,
    depth_from: int = 2,
    ordered: bool = False,
    indent: str = "\t",
) -> str:
    bullet = "1." if ordered else "-"
    lines = [
        f"{indent * max(0, entry.level - depth_from)}{bullet} "
        f"[{entry.text}](#{entry.anchor})"
        for entry in entries
    ]
    return "\n".join(lines)


def render_toc_block(
    entries: Iterable[TocEntry],
    options: Mapping[str, str],
    *,
    settings: TocSettings | None = None,
) -> str:
    """Render a complete ``<!-- TOC -->`` block, markers included."""
    settings = settings or TocSettings()
    depth_from, _, ordered = resolve_toc_options(options, settings)
    attrs = " ".join(f"{key}:{value}" for key, value in options.items())
    opening = f"<!-- TOC {attrs} -->" if attrs else "<!-- TOC -->"

    body = render_toc(
        entries, depth_from=depth_from, ordered=ordered, indent=settings.indent
    )
    if not body:
        return f"{opening}\n\n{TOC_CLOSE}"
    return f"{opening}\n\n{body}\n\n{TOC_CLOSE}"


def resolve_toc_options(
    options: Mapping[str, str], settings: TocSettings
) -> tuple[int, int, bool]:
    """Return ``(depth_from, depth_to, ordered)`` for a ToC block.

    Options written on the block win over the configured defaults.
    """

    def _int(key: str, default: int) -> int:
        try:
            return int(options[key])
        except (KeyError, ValueError):
            return default

    depth_from = _int("depthFrom", settings.depth_from)
    depth_to = _int("depthTo", settings.depth_to)
    ordered_raw = options.get("orderedList")
    ordered = (
        settings.ordered_list
        if ordered_raw is None
        else ordered_raw.lower() in _TRUE_VALUES
    )
    return depth_from, depth_to, ordered


def toc_options_error(
    options: Mapping[str, str], settings: TocSettings
) -> str | None:
    """Describe why a block's depth options cannot be used, or ``None``."""
    depth_from, depth_to, _ = resolve_toc_options(options, settings)
    try:
        _validate_depth(depth_from, depth_to)
    except ValueError as exc:
        return f"{exc} (depthFrom:{depth_from} depthTo:{depth_to})"
    return None


def default_toc_options(settings: TocSettings) -> dict[str, str]:
    return {
        "depthFrom": str(settings.depth_from),
        "depthTo": str(settings.depth_to),
        "orderedList": "1" if settings.ordered_list else "0",
    }


def update_toc(
    text: str,
    *,
    config: LessonKitConfig | None = None,
    insert: bool = False,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> str:
    """Regenerate the ToC block of a lesson's markdown text.

    - An existing block is rebuilt with its own options.
    - Without a block, one is inserted after the H1 only when ``insert``.
    - An unterminated block, or one with unusable depth options, is left alone.
    - Updating an up-to-date document returns identical text.
    """
    from lesson_kit.parsers.markdown_parser import MarkdownParser

    config = config or LessonKitConfig()
    settings = config.toc
    parser = MarkdownParser(
        output_languages=config.lint.output_languages, toc_settings=settings
    )
    lesson = parser.parse_text(text)
    lines = text.splitlines()

    if lesson.toc is None:
        if not insert:
            return text
        options = default_toc_options(settings)
        depth_from, depth_to, _ = resolve_toc_options(options, settings)
        entries = generate_toc(
            lesson, depth_from=depth_from, depth_to=depth_to, metrics_hook=metrics_hook
        )
        block = render_toc_block(entries, options, settings=settings).split("\n")

        head = lines[: lesson.title_line]
        rest = lines[lesson.title_line :]
        while rest and not rest[0].strip():
            rest = rest[1:]
        if head:
            new_lines = [*head, "", *block, "", *rest]
        else:
            new_lines = [*block, "", *rest]
        logger.info("Inserted ToC into lesson with %d entries", len(entries))
    else:
        if lesson.toc.end_line is None:
            logger.warning(
                "ToC block opened on line %d is never closed; leaving it unchanged",
                lesson.toc.start_line,
            )
            return text
        options = lesson.toc.options
        problem = toc_options_error(options, settings)
        if problem is not None:
            logger.warning(
                "ToC block on line %d has unusable options: %s; leaving it unchanged",
                lesson.toc.start_line,
                problem,
            )
            return text
        depth_from, depth_to, _ = resolve_toc_options(options, settings)
        entries = generate_toc(
            lesson, depth_from=depth_from, depth_to=depth_to, metrics_hook=metrics_hook
        )
        block = render_toc_block(entries, options, settings=settings).split("\n")
        new_lines = [
            *lines[: lesson.toc.start_line - 1],
            *block,
            *lines[lesson.toc.end_line :],
        ]

    updated = "\n".join(new_lines)
    if text.endswith("\n"):
        updated += "\n"
    if updated != text:
        metrics_hook.increment(names.TOC_UPDATES_TOTAL)
        logger.debug("ToC changed")
    return updated


def toc_is_current(text: str, *, config: LessonKitConfig | None = None) -> bool:
    return update_toc(text, config=config) == text
