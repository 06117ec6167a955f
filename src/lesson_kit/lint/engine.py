import logging
from collections.abc import Iterable
from time import monotonic

from lesson_kit.config.settings import LessonKitConfig
from lesson_kit.corpus.corpus import LessonCorpus
from lesson_kit.observability import names
from lesson_kit.observability.base import MetricsHook, NoOpMetricsHook
from lesson_kit.parsers.models import Lesson

from .diagnostic import Diagnostic, sort_key
from .registry import RuleRegistry
from .rule import LintContext, Rule
from .rules import default_registry

logger = logging.getLogger(__name__)


class Linter:
    """Runs the enabled rules over lessons and collects diagnostics.

    Rule names in the config's ``disabled_rules`` and ``severity_overrides``
    must exist in the registry; an unknown name raises ``KeyError`` here
    rather than being silently ignored.
    """

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        config: LessonKitConfig | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self.registry = registry or default_registry()
        self.config = config or LessonKitConfig()
        self.metrics_hook = metrics_hook

        for name in self.config.lint.disabled_rules:
            self.registry.get(name)
        for name in self.config.lint.severity_overrides:
            self.registry.get(name)

    def enabled_rules(self) -> list[Rule]:
        disabled = set(self.config.lint.disabled_rules)
        return [
            rule for name, rule in self.registry.list().items() if name not in disabled
        ]

    def lint(
        self, lesson: Lesson, *, context: LintContext | None = None
    ) -> list[Diagnostic]:
        start = monotonic()
        context = context or LintContext(
            config=self.config, lessons={lesson.name: lesson}
        )
        label = str(lesson.path) if lesson.path is not None else lesson.name
        overrides = self.config.lint.severity_overrides

        diagnostics: list[Diagnostic] = []
        for rule in self.enabled_rules():
            logger.debug("Running rule %s on %s", rule.name, label)
            severity = overrides.get(rule.name, rule.severity)
            for finding in rule.check(lesson, context):
                diagnostics.append(
                    Diagnostic(
                        rule=rule.name,
                        severity=severity,
                        message=finding.message,
                        line=finding.line,
                        lesson=label,
                    )
                )
                self.metrics_hook.increment(
                    names.LINT_DIAGNOSTICS_TOTAL, labels={"rule": rule.name}
                )

        diagnostics.sort(key=sort_key)
        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.LINT_DURATION, elapsed_ms)
        self.metrics_hook.increment(names.LINT_LESSONS_TOTAL)
        logger.debug("Lesson %s: %d diagnostics", label, len(diagnostics))
        return diagnostics

    def lint_lessons(self, lessons: Iterable[Lesson]) -> list[Diagnostic]:
        """Lint lessons together so cross-lesson links can be checked."""
        ordered = sorted(lessons, key=lambda lesson: lesson.name)
        context = LintContext(
            config=self.config, lessons={lesson.name: lesson for lesson in ordered}
        )
        diagnostics: list[Diagnostic] = []
        for lesson in ordered:
            diagnostics.extend(self.lint(lesson, context=context))
        logger.info(
            "Linted %d lessons: %d diagnostics", len(ordered), len(diagnostics)
        )
        return diagnostics

    def lint_corpus(self, corpus: LessonCorpus) -> list[Diagnostic]:
        return self.lint_lessons(corpus.lessons())
