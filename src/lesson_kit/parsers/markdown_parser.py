# parsers/markdown_parser.py

import logging
import re
from collections.abc import Iterable
from dataclasses import replace
from math import gcd
from pathlib import Path
from time import monotonic
from typing import TextIO

from lesson_kit.config.settings import TocSettings
from lesson_kit.observability import names
from lesson_kit.observability.base import MetricsHook, NoOpMetricsHook
from lesson_kit.toc.slug import unique_slugs

from .base import LessonParser
from .models import (
    Block,
    CodeExample,
    Fence,
    Lesson,
    Link,
    OutputBlock,
    Prose,
    Section,
    TocBlock,
    TocEntry,
)

logger = logging.getLogger(__name__)

HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})(.*)$")
FENCE_CLOSE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})[ \t]*$")
TOC_OPEN_RE = re.compile(r"^\s*<!--\s*TOC\b(.*?)-->\s*$")
TOC_CLOSE_RE = re.compile(r"^\s*<!--\s*/TOC\s*-->\s*$")
TOC_OPTION_RE = re.compile(r"(\w+):(\S+)")
TOC_ENTRY_RE = re.compile(
    r"^([ \t]*)(?:[-*+]|\d+\.)[ \t]+\[(.*)\]\(#([^)\s]*)\)[ \t]*$"
)
LINK_RE = re.compile(r"(?<!!)\[([^\]]*)\]\(([^)\s]+)(?:[ \t]+\"[^\"]*\")?\)")

DEFAULT_OUTPUT_LANGUAGES = frozenset({"", "text", "output", "console"})


class _Container:
    """Mutable block list for the section being built."""

    def __init__(self) -> None:
        self.blocks: list[Block] = []
        # index of the last code example still waiting for its output block
        self.pending_example: int | None = None


class _SectionDraft(_Container):
    def __init__(
        self, heading: str, level: int, line: int, heading_index: int
    ) -> None:
        super().__init__()
        self.heading = heading
        self.level = level
        self.line = line
        self.heading_index = heading_index


class _ParseState:
    def __init__(
        self, output_languages: frozenset[str], toc_settings: TocSettings
    ) -> None:
        self.output_languages = output_languages
        self.toc_settings = toc_settings

        self.headings: list[str] = []
        self.title = ""
        self.title_count = 0
        self.title_line = 0

        self.preamble = _Container()
        self.sections: list[_SectionDraft] = []
        self.links: list[Link] = []
        self.unclosed: list[Fence] = []

        self.paragraph: list[str] = []
        self.paragraph_line = 0

        self.fence: Fence | None = None
        self.fence_lines: list[str] = []

        self.in_toc = False
        self.toc_options: dict[str, str] | None = None
        self.toc_raw: list[tuple[str, str, str, int]] = []
        self.toc_start = 0
        self.toc_end: int | None = None

    @property
    def container(self) -> _Container:
        return self.sections[-1] if self.sections else self.preamble

    def feed(self, lineno: int, line: str) -> None:
        if self.fence is not None:
            if self._closes_fence(line):
                self._close_fence()
            else:
                self.fence_lines.append(line)
            return

        if self.in_toc:
            if TOC_CLOSE_RE.match(line):
                self.in_toc = False
                self.toc_end = lineno
                return
            if not (HEADING_RE.match(line) or FENCE_RE.match(line)):
                entry = TOC_ENTRY_RE.match(line)
                if entry:
                    indent, text, anchor = entry.groups()
                    self.toc_raw.append((indent, text, anchor, lineno))
                return
            # heading or fence before the closing marker: the block is unterminated
            self.in_toc = False

        toc_open = TOC_OPEN_RE.match(line)
        if toc_open and self.toc_options is None:
            self._flush_paragraph()
            self.toc_options = dict(TOC_OPTION_RE.findall(toc_open.group(1)))
            self.toc_start = lineno
            self.in_toc = True
            return

        fence = FENCE_RE.match(line)
        if fence:
            marker, info = fence.group(1), fence.group(2).strip()
            if not (marker[0] == "`" and "`" in info):
                self._flush_paragraph()
                self.fence = Fence(marker=marker, info=info, line=lineno)
                self.fence_lines = []
                return

        heading = HEADING_RE.match(line)
        if heading:
            self._flush_paragraph()
            self._start_heading(len(heading.group(1)), heading.group(2) or "", lineno)
            return

        if not line.strip():
            self._flush_paragraph()
            return

        if not self.paragraph:
            self.paragraph_line = lineno
        self.paragraph.append(line.strip())
        self._collect_links(line, lineno)

    def finish(self, *, name: str, path: Path | None) -> Lesson:
        if self.fence is not None:
            self.unclosed.append(self.fence)
            self._close_fence()
        self._flush_paragraph()

        anchors = unique_slugs(self.headings)
        sections = tuple(
            Section(
                heading=draft.heading,
                level=draft.level,
                anchor=anchors[draft.heading_index],
                line=draft.line,
                blocks=tuple(draft.blocks),
            )
            for draft in self.sections
        )

        return Lesson(
            name=name,
            title=self.title,
            sections=sections,
            title_count=self.title_count,
            title_line=self.title_line,
            anchors=tuple(anchors),
            preamble=tuple(self.preamble.blocks),
            toc=self._toc_block(),
            links=tuple(self.links),
            unclosed_fences=tuple(self.unclosed),
            path=path,
            metadata={"source_type": "markdown"},
        )

    def _closes_fence(self, line: str) -> bool:
        assert self.fence is not None
        match = FENCE_CLOSE_RE.match(line)
        if not match:
            return False
        marker = match.group(1)
        return marker[0] == self.fence.marker[0] and len(marker) >= len(
            self.fence.marker
        )

    def _close_fence(self) -> None:
        assert self.fence is not None
        fence = self.fence
        body = "\n".join(self.fence_lines)
        language = fence.info.split()[0] if fence.info else ""
        container = self.container

        if language.lower() in self.output_languages:
            pending = container.pending_example
            output = OutputBlock(text=body, line=fence.line, attached=pending is not None)
            if pending is not None:
                example = container.blocks[pending]
                container.blocks[pending] = replace(example, expected_output=output)
            container.blocks.append(output)
            container.pending_example = None
        else:
            container.blocks.append(
                CodeExample(source=body, language=language, line=fence.line)
            )
            container.pending_example = len(container.blocks) - 1

        self.fence = None
        self.fence_lines = []

    def _start_heading(self, level: int, text: str, lineno: int) -> None:
        heading_index = len(self.headings)
        self.headings.append(text)
        self._collect_links(text, lineno)

        if level == 1:
            self.title_count += 1
            if self.title_count == 1:
                self.title = text
                self.title_line = lineno
                return

        self.sections.append(_SectionDraft(text, level, lineno, heading_index))

    def _flush_paragraph(self) -> None:
        if not self.paragraph:
            return
        self.container.blocks.append(
            Prose(text="\n".join(self.paragraph), line=self.paragraph_line)
        )
        self.paragraph = []

    def _collect_links(self, text: str, lineno: int) -> None:
        for match in LINK_RE.finditer(text):
            self.links.append(
                Link(text=match.group(1), target=match.group(2), line=lineno)
            )

    def _toc_block(self) -> TocBlock | None:
        if self.toc_options is None:
            return None

        raw_depth = self.toc_options.get("depthFrom", "")
        depth_from = self.toc_settings.depth_from
        # out-of-range values are left for the linter to report
        if raw_depth.isdigit() and 1 <= int(raw_depth) <= 6:
            depth_from = int(raw_depth)

        # one indent unit per level; the configured indent unless the block
        # is indented in some other step
        widths = [len(indent.expandtabs(4)) for indent, *_ in self.toc_raw]
        offset = min(widths, default=0)
        widths = [width - offset for width in widths]
        unit = len(self.toc_settings.indent.expandtabs(4)) or 1
        if any(width % unit for width in widths):
            unit = gcd(*widths)
        entries = tuple(
            TocEntry(
                text=text,
                anchor=anchor,
                level=depth_from + width // unit,
                line=lineno,
            )
            for width, (_, text, anchor, lineno) in zip(widths, self.toc_raw)
        )
        return TocBlock(
            options=dict(self.toc_options),
            entries=entries,
            start_line=self.toc_start,
            end_line=self.toc_end,
        )


class MarkdownParser(LessonParser):
    """
    Deterministic markdown lesson parser.
    - ATX headings; the first H1 is the lesson title
    - Fenced blocks with backticks or tildes
    - Tagged fences are code examples, plain fences are expected output
    - At most one ToC comment block is recognized
    """

    def __init__(
        self,
        *,
        output_languages: Iterable[str] = DEFAULT_OUTPUT_LANGUAGES,
        toc_settings: TocSettings | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self.output_languages = frozenset(lang.lower() for lang in output_languages)
        self.toc_settings = toc_settings or TocSettings()
        self.metrics_hook = metrics_hook

    def parse(
        self, source: str | Path | TextIO, *, name: str | None = None
    ) -> Lesson:
        if isinstance(source, (str, Path)):
            path = Path(source)
            logger.debug("Reading lesson file: %s", path)
            text = path.read_text(encoding="utf-8")
            return self.parse_text(text, name=name or path.stem, path=path)

        stream_name = getattr(source, "name", None)
        path = Path(stream_name) if isinstance(stream_name, str) else None
        return self.parse_text(
            source.read(),
            name=name or (path.stem if path else "lesson"),
            path=path,
        )

    def parse_text(
        self, text: str, *, name: str = "lesson", path: Path | None = None
    ) -> Lesson:
        start = monotonic()
        state = _ParseState(self.output_languages, self.toc_settings)
        for lineno, line in enumerate(text.splitlines(), start=1):
            state.feed(lineno, line)
        lesson = state.finish(name=name, path=path)

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.LESSON_PARSE_DURATION, elapsed_ms)
        self.metrics_hook.increment(names.LESSONS_PARSED_TOTAL)
        self.metrics_hook.record_gauge(
            names.LESSON_SECTIONS, len(lesson.sections), labels={"lesson": name}
        )
        if lesson.unclosed_fences:
            logger.warning(
                "Lesson %s has %d unclosed fence(s)", name, len(lesson.unclosed_fences)
            )
            self.metrics_hook.increment(
                names.UNCLOSED_FENCES_TOTAL, len(lesson.unclosed_fences)
            )
        logger.debug(
            "Parsed lesson %s: %d sections, %d links",
            name,
            len(lesson.sections),
            len(lesson.links),
        )
        return lesson
