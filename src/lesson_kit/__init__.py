# Config
from .config import LessonKitConfig, LintSettings, TocSettings, find_config

# Corpus
from .corpus import LessonCorpus

# Lint
from .lint import Diagnostic, Linter, Rule, RuleRegistry, default_registry

# Observability
from .observability import LoggingMetricsHook, MetricsHook, NoOpMetricsHook

# Parsers
from .parsers import (
    CodeExample,
    Lesson,
    MarkdownParser,
    OutputBlock,
    Prose,
    Section,
    TocBlock,
    TocEntry,
)

# ToC
from .toc import generate_toc, render_toc, slugify, update_toc

__version__ = "0.1.0"

__all__ = [
    # Config
    "LessonKitConfig",
    "LintSettings",
    "TocSettings",
    "find_config",
    # Corpus
    "LessonCorpus",
    # Lint
    "Diagnostic",
    "Linter",
    "Rule",
    "RuleRegistry",
    "default_registry",
    # Observability
    "LoggingMetricsHook",
    "MetricsHook",
    "NoOpMetricsHook",
    # Parsers
    "CodeExample",
    "Lesson",
    "MarkdownParser",
    "OutputBlock",
    "Prose",
    "Section",
    "TocBlock",
    "TocEntry",
    # ToC
    "generate_toc",
    "render_toc",
    "slugify",
    "update_toc",
]
