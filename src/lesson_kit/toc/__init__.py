"""Anchor slugs and Table-of-Contents generation for lessons.

Example:
    >>> from lesson_kit.toc import slugify
    >>> slugify("Part A: Intro to Dicts")
    'part-a-intro-to-dicts'
"""

# slug must load before generator: the parser imports it while loading
from .slug import slugify, unique_slugs
from .generator import (
    generate_toc,
    render_toc,
    render_toc_block,
    resolve_toc_options,
    toc_is_current,
    toc_options_error,
    update_toc,
)

__all__ = [
    "slugify",
    "unique_slugs",
    "generate_toc",
    "render_toc",
    "render_toc_block",
    "resolve_toc_options",
    "toc_is_current",
    "toc_options_error",
    "update_toc",
]
