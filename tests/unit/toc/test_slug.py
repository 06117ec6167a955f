import re

import pytest

from lesson_kit.toc.slug import slugify, unique_slugs

SLUG_RE = re.compile(r"^[a-z0-9-]*$")


class TestSlugify:
    def test_part_heading(self) -> None:
        assert slugify("Part A: Intro to Dicts") == "part-a-intro-to-dicts"

    def test_punctuation_is_dropped(self) -> None:
        assert slugify("Hello, World!") == "hello-world"

    def test_repeated_hyphens_are_kept(self) -> None:
        """Each whitespace character maps to one hyphen; nothing collapses."""
        assert slugify("Part B - Decorators") == "part-b---decorators"
        assert slugify("Tabs\tand  spaces") == "tabs-and--spaces"

    def test_inline_code_and_calls(self) -> None:
        assert slugify("`dict.get()` and `setdefault`") == "dictget-and-setdefault"

    def test_underscore_is_dropped(self) -> None:
        assert slugify("snake_case names") == "snakecase-names"

    def test_non_ascii_letters_are_dropped(self) -> None:
        assert slugify("Café Über") == "caf-ber"

    def test_link_markup_keeps_link_text(self) -> None:
        assert slugify("[Decorators](decorators.md) recap") == "decorators-recap"

    def test_empty_heading(self) -> None:
        assert slugify("") == ""

    @pytest.mark.parametrize(
        "heading",
        [
            "Part C: *args & **kwargs",
            "What's `@wraps` for?",
            "100% Pure (Functions)",
            "Ünïcödé — dashes – too",
            "  leading and trailing  ",
        ],
    )
    def test_output_only_uses_slug_alphabet(self, heading: str) -> None:
        assert SLUG_RE.match(slugify(heading))


class TestUniqueSlugs:
    def test_repeats_get_numbered_suffixes(self) -> None:
        assert unique_slugs(["Intro", "Intro", "Intro", "Other"]) == [
            "intro",
            "intro-1",
            "intro-2",
            "other",
        ]

    def test_headings_with_same_slug_are_disambiguated(self) -> None:
        assert unique_slugs(["Part A", "Part A!"]) == ["part-a", "part-a-1"]

    def test_empty_input(self) -> None:
        assert unique_slugs([]) == []

    def test_suffix_skips_slug_already_emitted(self) -> None:
        assert unique_slugs(["A", "A", "A-1"]) == ["a", "a-1", "a-1-1"]

    def test_literal_suffixed_heading_first(self) -> None:
        """A heading that already reads like a suffix keeps its slug."""
        assert unique_slugs(["A-1", "A", "A"]) == ["a-1", "a", "a-2"]

    def test_result_is_always_unique(self) -> None:
        slugs = unique_slugs(["x", "x-1", "x", "x", "x-2", "x-1"])
        assert len(set(slugs)) == len(slugs)
