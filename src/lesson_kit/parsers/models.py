# parsers/models.py

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Prose:
    text: str
    line: int


@dataclass(frozen=True)
class OutputBlock:
    """Expected output shown after an example. Kept verbatim."""

    text: str
    line: int
    attached: bool = False


@dataclass(frozen=True)
class CodeExample:
    """A fenced snippet. Rendered verbatim, never executed."""

    source: str
    language: str
    line: int
    expected_output: OutputBlock | None = None


Block = Prose | CodeExample | OutputBlock


@dataclass(frozen=True)
class Section:
    heading: str
    level: int
    anchor: str
    line: int
    blocks: tuple[Block, ...] = ()


@dataclass(frozen=True)
class TocEntry:
    text: str
    anchor: str
    level: int
    line: int = 0


@dataclass(frozen=True)
class TocBlock:
    options: dict[str, str]
    entries: tuple[TocEntry, ...]
    start_line: int
    end_line: int | None


@dataclass(frozen=True)
class Link:
    text: str
    target: str
    line: int

    @property
    def is_anchor(self) -> bool:
        return self.target.startswith("#")


@dataclass(frozen=True)
class Fence:
    marker: str
    info: str
    line: int


@dataclass(frozen=True)
class Lesson:
    """A parsed lesson.

    Sections are kept in reading order. Everything between the H1 title and
    the first section heading lives in ``preamble``.
    """

    name: str
    title: str
    sections: tuple[Section, ...]
    title_count: int = 1
    title_line: int = 0
    anchors: tuple[str, ...] = ()
    preamble: tuple[Block, ...] = ()
    toc: TocBlock | None = None
    links: tuple[Link, ...] = ()
    unclosed_fences: tuple[Fence, ...] = ()
    path: Path | None = None
    metadata: dict = field(default_factory=dict)

    def code_examples(self) -> list[CodeExample]:
        """Every code example in reading order, preamble included."""
        blocks = [*self.preamble, *(b for s in self.sections for b in s.blocks)]
        return [block for block in blocks if isinstance(block, CodeExample)]
