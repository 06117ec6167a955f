from .base import LessonParser
from .markdown_parser import MarkdownParser
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

__all__ = [
    "LessonParser",
    "MarkdownParser",
    # Models
    "Block",
    "CodeExample",
    "Fence",
    "Lesson",
    "Link",
    "OutputBlock",
    "Prose",
    "Section",
    "TocBlock",
    "TocEntry",
]
