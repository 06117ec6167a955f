from pathlib import Path

import pytest

from lesson_kit.config.settings import LessonKitConfig, TocSettings
from lesson_kit.lint.diagnostic import Diagnostic
from lesson_kit.lint.engine import Linter
from lesson_kit.parsers.markdown_parser import MarkdownParser


def lint(text: str, *, name: str = "lesson") -> list[Diagnostic]:
    lesson = MarkdownParser().parse_text(text, name=name)
    return Linter().lint(lesson)


def by_rule(diagnostics: list[Diagnostic], rule: str) -> list[Diagnostic]:
    return [d for d in diagnostics if d.rule == rule]


def test_clean_lesson_has_no_diagnostics(sample_text: str) -> None:
    assert lint(sample_text) == []


class TestMissingTitle:
    def test_no_h1(self) -> None:
        (diagnostic,) = by_rule(lint("## Part A\n"), "missing-title")

        assert diagnostic.line == 1
        assert diagnostic.severity == "error"
        assert diagnostic.message == "lesson has no H1 title"

    def test_extra_h1(self) -> None:
        (diagnostic,) = by_rule(lint("# One\n\n# Two\n"), "missing-title")

        assert diagnostic.line == 3
        assert "extra H1 'Two'" in diagnostic.message


class TestTocEntries:
    def test_wrong_anchor_is_missing_and_stale(self) -> None:
        text = (
            "# Dicts\n<!-- TOC -->\n"
            "- [Part A: Intro to Dicts](#part-a-intro-dicts)\n"
            "<!-- /TOC -->\n"
            "## Part A: Intro to Dicts\n"
        )
        diagnostics = lint(text)

        (missing,) = by_rule(diagnostics, "toc-missing-entry")
        assert missing.line == 5
        assert missing.message == (
            "heading 'Part A: Intro to Dicts' has no ToC entry "
            "[Part A: Intro to Dicts](#part-a-intro-to-dicts)"
        )
        (stale,) = by_rule(diagnostics, "toc-stale-entry")
        assert stale.line == 3
        assert "points at no heading" in stale.message

    def test_renamed_heading_reports_text_mismatch(self) -> None:
        text = (
            "# Dicts\n<!-- TOC -->\n- [Part A: Intro](#part-a)\n<!-- /TOC -->\n"
            "## Part A\n"
        )
        (stale,) = by_rule(lint(text), "toc-stale-entry")

        assert stale.message == (
            "ToC entry 'Part A: Intro' does not match heading 'Part A' for #part-a"
        )

    def test_headings_outside_depth_range_are_ignored(self) -> None:
        text = (
            "# T\n<!-- TOC depthFrom:2 depthTo:2 -->\n- [A](#a)\n<!-- /TOC -->\n"
            "## A\n### Deep\n"
        )

        assert lint(text) == []

    def test_without_toc_block_toc_rules_do_not_run(self) -> None:
        diagnostics = lint("# T\n## A\n## B\n")

        assert diagnostics == []

    def test_config_depth_applies_when_block_has_no_options(self) -> None:
        text = "# T\n<!-- TOC -->\n- [A](#a)\n<!-- /TOC -->\n## A\n### Deep\n"
        lesson = MarkdownParser().parse_text(text)

        (missing,) = by_rule(lint(text), "toc-missing-entry")
        assert missing.line == 6

        shallow = LessonKitConfig(toc=TocSettings(depth_to=2))
        assert Linter(config=shallow).lint(lesson) == []


class TestInvalidTocOptions:
    @pytest.mark.parametrize(
        ("options", "message"),
        [
            ("depthFrom:0", "depth_from must be >= 1 (depthFrom:0 depthTo:6)"),
            ("depthTo:9", "depth_to must be <= 6 (depthFrom:2 depthTo:9)"),
            (
                "depthFrom:4 depthTo:2",
                "depth_from must be <= depth_to (depthFrom:4 depthTo:2)",
            ),
        ],
    )
    def test_unusable_depth_is_reported(self, options: str, message: str) -> None:
        text = f"# T\n<!-- TOC {options} -->\n- [A](#a)\n<!-- /TOC -->\n## A\n"

        diagnostics = lint(text)

        assert [d.rule for d in diagnostics] == ["invalid-toc-options"]
        assert diagnostics[0].line == 2
        assert diagnostics[0].severity == "error"
        assert diagnostics[0].message == f"ToC block options unusable: {message}"

    def test_entry_rules_skip_unusable_block(self) -> None:
        """A bad range reports once instead of flagging every entry as stale."""
        text = (
            "# T\n<!-- TOC depthFrom:4 depthTo:2 -->\n- [Gone](#gone)\n"
            "<!-- /TOC -->\n## A\n## B\n"
        )

        assert {d.rule for d in lint(text)} == {"invalid-toc-options"}

    def test_clash_with_configured_depth(self) -> None:
        text = "# T\n<!-- TOC depthFrom:5 -->\n<!-- /TOC -->\n## A\n"
        lesson = MarkdownParser().parse_text(text)
        config = LessonKitConfig(toc=TocSettings(depth_to=3))

        (diagnostic,) = Linter(config=config).lint(lesson)
        assert diagnostic.rule == "invalid-toc-options"
        assert "(depthFrom:5 depthTo:3)" in diagnostic.message


class TestTocOrder:
    def test_renumbered_parts_must_be_reordered(self) -> None:
        text = (
            "# Lesson\n<!-- TOC -->\n- [Part A](#part-a)\n- [Part B](#part-b)\n"
            "<!-- /TOC -->\n## Part B\n## Part A\n"
        )
        diagnostics = lint(text)

        assert [d.rule for d in diagnostics] == ["toc-order"]
        assert diagnostics[0].line == 3
        assert diagnostics[0].message == (
            "ToC entry 'Part A' is out of order; expected 'Part B'"
        )

    def test_missing_entry_does_not_break_order(self) -> None:
        text = (
            "# L\n<!-- TOC -->\n- [A](#a)\n- [C](#c)\n<!-- /TOC -->\n"
            "## A\n## B\n## C\n"
        )

        assert by_rule(lint(text), "toc-order") == []


class TestStructure:
    def test_unclosed_toc(self) -> None:
        (diagnostic,) = by_rule(lint("# T\n<!-- TOC -->\n## A\n"), "unclosed-toc")

        assert diagnostic.line == 2

    def test_unbalanced_fence(self) -> None:
        (diagnostic,) = by_rule(lint("# T\n## A\n```py\nx = 1\n"), "unbalanced-fence")

        assert diagnostic.line == 3
        assert diagnostic.message == "fence '```py' is never closed"

    def test_duplicate_anchor(self) -> None:
        text = "# T\n## Part A\n## Part A!\n"
        (diagnostic,) = by_rule(lint(text), "duplicate-anchor")

        assert diagnostic.line == 3
        assert diagnostic.message == (
            "heading 'Part A!' repeats anchor #part-a first used on line 2"
        )

    def test_heading_may_not_repeat_title_anchor(self) -> None:
        (diagnostic,) = by_rule(lint("# Setup\n## Setup\n"), "duplicate-anchor")

        assert diagnostic.line == 2

    def test_broken_anchor_link(self) -> None:
        text = "# T\n\nSee [above](#nowhere) and [ok](#t).\n"
        (diagnostic,) = by_rule(lint(text), "broken-anchor-link")

        assert diagnostic.line == 3
        assert diagnostic.message == "link to missing anchor #nowhere"

    def test_orphan_output_is_a_warning(self) -> None:
        (diagnostic,) = by_rule(lint("# T\n\n```\n42\n```\n"), "orphan-output")

        assert diagnostic.severity == "warning"
        assert diagnostic.line == 3


class TestBrokenLessonLink:
    def test_missing_file_next_to_lesson(self, tmp_path: Path) -> None:
        path = tmp_path / "dicts.md"
        path.write_text("# Dicts\n\nNext: [decorators](decorators.md).\n")
        lesson = MarkdownParser().parse(path)

        (diagnostic,) = by_rule(Linter().lint(lesson), "broken-lesson-link")

        assert diagnostic.severity == "warning"
        assert diagnostic.message == "link to missing lesson decorators.md"
        assert diagnostic.lesson == str(path)

    def test_existing_file_is_fine(self, tmp_path: Path) -> None:
        (tmp_path / "decorators.md").write_text("# Decorators\n")
        path = tmp_path / "dicts.md"
        path.write_text("# Dicts\n\n[next](decorators.md)\n")

        assert Linter().lint(MarkdownParser().parse(path)) == []

    def test_missing_anchor_in_other_lesson(self, tmp_path: Path) -> None:
        (tmp_path / "decorators.md").write_text("# Decorators\n## Part A\n")
        (tmp_path / "dicts.md").write_text(
            "# Dicts\n\n[a](decorators.md#part-a) [z](decorators.md#part-z)\n"
        )
        parser = MarkdownParser()
        lessons = [parser.parse(p) for p in sorted(tmp_path.glob("*.md"))]

        diagnostics = by_rule(Linter().lint_lessons(lessons), "broken-lesson-link")

        assert [d.message for d in diagnostics] == [
            "link to missing anchor #part-z in lesson decorators.md"
        ]

    def test_external_links_are_skipped(self) -> None:
        text = "# T\n\n[docs](https://docs.python.org/3/tutorial.md)\n"

        assert lint(text) == []

    def test_unknown_lesson_in_memory_corpus(self) -> None:
        parser = MarkdownParser()
        lessons = [
            parser.parse_text("# A\n\n[b](b.md) [c](c.md)\n", name="a"),
            parser.parse_text("# B\n", name="b"),
        ]

        diagnostics = by_rule(Linter().lint_lessons(lessons), "broken-lesson-link")

        assert [d.message for d in diagnostics] == ["link to missing lesson c.md"]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "```",
        "<!-- TOC -->",
        "# \n## \n## \n",
        "- [x](#)\n<!-- /TOC -->\n",
    ],
)
def test_rules_never_raise_on_malformed_lessons(text: str) -> None:
    lint(text)
