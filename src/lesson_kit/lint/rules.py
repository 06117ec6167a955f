"""Built-in structural rules for lesson files.

Each check receives a parsed lesson and yields findings. Checks never
raise on malformed lessons; a lesson that cannot satisfy a rule simply
produces findings for it.
"""

from collections.abc import Iterator
from pathlib import PurePosixPath

from lesson_kit.parsers.models import Lesson, OutputBlock, Section
from lesson_kit.toc.generator import resolve_toc_options, toc_options_error
from lesson_kit.toc.slug import slugify

from .diagnostic import Finding
from .registry import RuleRegistry
from .rule import LintContext, Rule

_EXTERNAL_PREFIXES = ("http://", "https://", "mailto:", "ftp://", "//")


def _sections_in_toc_range(
    lesson: Lesson, context: LintContext
) -> list[Section] | None:
    """Sections the ToC should list, or ``None`` when there is nothing to check."""
    if lesson.toc is None:
        return None
    if toc_options_error(lesson.toc.options, context.config.toc) is not None:
        return None
    depth_from, depth_to, _ = resolve_toc_options(
        lesson.toc.options, context.config.toc
    )
    return [s for s in lesson.sections if depth_from <= s.level <= depth_to]


def check_missing_title(lesson: Lesson, context: LintContext) -> Iterator[Finding]:
    if lesson.title_count == 0:
        yield Finding(1, "lesson has no H1 title")
        return
    extra = [s for s in lesson.sections if s.level == 1]
    for section in extra:
        yield Finding(
            section.line,
            f"extra H1 '{section.heading}'; a lesson has exactly one title",
        )


def check_toc_missing_entry(lesson: Lesson, context: LintContext) -> Iterator[Finding]:
    sections = _sections_in_toc_range(lesson, context)
    if sections is None:
        return
    assert lesson.toc is not None
    listed = {(entry.text, entry.anchor) for entry in lesson.toc.entries}
    for section in sections:
        if (section.heading, section.anchor) not in listed:
            yield Finding(
                section.line,
                f"heading '{section.heading}' has no ToC entry "
                f"[{section.heading}](#{section.anchor})",
            )


def check_toc_stale_entry(lesson: Lesson, context: LintContext) -> Iterator[Finding]:
    sections = _sections_in_toc_range(lesson, context)
    if sections is None:
        return
    assert lesson.toc is not None
    headings = {(s.heading, s.anchor) for s in sections}
    by_anchor = {s.anchor: s for s in sections}
    for entry in lesson.toc.entries:
        if (entry.text, entry.anchor) in headings:
            continue
        section = by_anchor.get(entry.anchor)
        if section is not None:
            yield Finding(
                entry.line,
                f"ToC entry '{entry.text}' does not match heading "
                f"'{section.heading}' for #{entry.anchor}",
            )
        else:
            yield Finding(
                entry.line,
                f"ToC entry [{entry.text}](#{entry.anchor}) points at no heading",
            )


def check_toc_order(lesson: Lesson, context: LintContext) -> Iterator[Finding]:
    sections = _sections_in_toc_range(lesson, context)
    if sections is None:
        return
    assert lesson.toc is not None
    expected = [(s.heading, s.anchor) for s in sections]
    expected_keys = set(expected)
    entries = [
        entry
        for entry in lesson.toc.entries
        if (entry.text, entry.anchor) in expected_keys
    ]
    listed_keys = {(entry.text, entry.anchor) for entry in entries}
    # only headings that are listed take part in the ordering check
    expected = [key for key in expected if key in listed_keys]

    for entry, key in zip(entries, expected, strict=False):
        if (entry.text, entry.anchor) != key:
            yield Finding(
                entry.line,
                f"ToC entry '{entry.text}' is out of order; expected '{key[0]}'",
            )
            return


def check_unclosed_toc(lesson: Lesson, context: LintContext) -> Iterator[Finding]:
    if lesson.toc is not None and lesson.toc.end_line is None:
        yield Finding(lesson.toc.start_line, "ToC block has no closing <!-- /TOC -->")


def check_invalid_toc_options(
    lesson: Lesson, context: LintContext
) -> Iterator[Finding]:
    if lesson.toc is None:
        return
    problem = toc_options_error(lesson.toc.options, context.config.toc)
    if problem is not None:
        yield Finding(lesson.toc.start_line, f"ToC block options unusable: {problem}")


def check_unbalanced_fence(lesson: Lesson, context: LintContext) -> Iterator[Finding]:
    for fence in lesson.unclosed_fences:
        label = f"{fence.marker}{fence.info}"
        yield Finding(fence.line, f"fence '{label}' is never closed")


def check_duplicate_anchor(lesson: Lesson, context: LintContext) -> Iterator[Finding]:
    headings: list[tuple[int, str]] = [(s.line, s.heading) for s in lesson.sections]
    if lesson.title_count:
        headings.append((lesson.title_line, lesson.title))
    headings.sort()

    first_seen: dict[str, int] = {}
    for line, heading in headings:
        slug = slugify(heading)
        if slug in first_seen:
            yield Finding(
                line,
                f"heading '{heading}' repeats anchor #{slug} "
                f"first used on line {first_seen[slug]}",
            )
        else:
            first_seen[slug] = line


def check_broken_anchor_link(
    lesson: Lesson, context: LintContext
) -> Iterator[Finding]:
    anchors = set(lesson.anchors)
    for link in lesson.links:
        if link.is_anchor and link.target[1:] not in anchors:
            yield Finding(link.line, f"link to missing anchor {link.target}")


def check_broken_lesson_link(
    lesson: Lesson, context: LintContext
) -> Iterator[Finding]:
    for link in lesson.links:
        if link.is_anchor or link.target.startswith(_EXTERNAL_PREFIXES):
            continue
        target, _, fragment = link.target.partition("#")
        if not target.endswith(".md"):
            continue

        stem = PurePosixPath(target).stem
        if lesson.path is not None:
            if not (lesson.path.parent / target).is_file():
                yield Finding(link.line, f"link to missing lesson {target}")
                continue
        elif context.lessons and stem not in context.lessons:
            yield Finding(link.line, f"link to missing lesson {target}")
            continue

        other = context.lessons.get(stem)
        if fragment and other is not None and fragment not in other.anchors:
            yield Finding(
                link.line, f"link to missing anchor #{fragment} in lesson {target}"
            )


def check_orphan_output(lesson: Lesson, context: LintContext) -> Iterator[Finding]:
    blocks = [*lesson.preamble, *(b for s in lesson.sections for b in s.blocks)]
    for block in blocks:
        if isinstance(block, OutputBlock) and not block.attached:
            yield Finding(block.line, "output block does not follow a code example")


BUILTIN_RULES: list[Rule] = [
    Rule(
        name="missing-title",
        description="Lesson has exactly one H1 title",
        severity="error",
        check=check_missing_title,
    ),
    Rule(
        name="toc-missing-entry",
        description="Every heading in ToC range has an exactly matching ToC entry",
        severity="error",
        check=check_toc_missing_entry,
    ),
    Rule(
        name="toc-stale-entry",
        description="Every ToC entry points at a heading with the same text",
        severity="error",
        check=check_toc_stale_entry,
    ),
    Rule(
        name="toc-order",
        description="ToC entries follow heading order",
        severity="error",
        check=check_toc_order,
    ),
    Rule(
        name="unclosed-toc",
        description="ToC comment block has a closing marker",
        severity="error",
        check=check_unclosed_toc,
    ),
    Rule(
        name="invalid-toc-options",
        description="ToC block depth options lie within 1..6 and depthFrom <= depthTo",
        severity="error",
        check=check_invalid_toc_options,
    ),
    Rule(
        name="unbalanced-fence",
        description="Every fenced block opens and closes",
        severity="error",
        check=check_unbalanced_fence,
    ),
    Rule(
        name="duplicate-anchor",
        description="Heading anchors are unique within a lesson",
        severity="error",
        check=check_duplicate_anchor,
    ),
    Rule(
        name="broken-anchor-link",
        description="In-lesson #anchor links target an existing heading",
        severity="error",
        check=check_broken_anchor_link,
    ),
    Rule(
        name="broken-lesson-link",
        description="Links to other lessons resolve to an existing file and anchor",
        severity="warning",
        check=check_broken_lesson_link,
    ),
    Rule(
        name="orphan-output",
        description="Every output block follows a code example",
        severity="warning",
        check=check_orphan_output,
    ),
]


def default_registry() -> RuleRegistry:
    registry = RuleRegistry()
    for rule in BUILTIN_RULES:
        registry.register(rule)
    return registry
