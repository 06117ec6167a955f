# toc/slug.py

import re
from collections.abc import Iterable

_INLINE_LINK_RE = re.compile(r"\[([^\]]*)\]\([^)]*\)")


def slugify(heading: str) -> str:
    """Derive the in-document anchor for a heading.

    Lowercases, turns each whitespace character into ``-`` and drops
    everything outside ``[a-z0-9-]``. Repeated hyphens are not collapsed.

    Example:
        >>> slugify("Part A: Intro to Dicts")
        'part-a-intro-to-dicts'
    """
    text = _INLINE_LINK_RE.sub(r"\1", heading).lower()
    chars: list[str] = []
    for ch in text:
        if ch.isspace():
            chars.append("-")
        elif ch == "-" or "a" <= ch <= "z" or "0" <= ch <= "9":
            chars.append(ch)
    return "".join(chars)


def unique_slugs(headings: Iterable[str]) -> list[str]:
    """Slug every heading, suffixing repeats with ``-1``, ``-2``, ...

    A suffixed slug never collides with one already emitted, so
    ``A``, ``A``, ``A-1`` give ``a``, ``a-1``, ``a-1-1``.
    """
    # emitted slug -> number of suffixes handed out for it as a base
    seen: dict[str, int] = {}
    slugs: list[str] = []
    for heading in headings:
        base = slugify(heading)
        slug = base
        while slug in seen:
            seen[base] += 1
            slug = f"{base}-{seen[base]}"
        seen[slug] = 0
        slugs.append(slug)
    return slugs
