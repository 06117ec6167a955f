from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from lesson_kit.config.settings import LessonKitConfig
from lesson_kit.parsers.models import Lesson

from .diagnostic import Finding, Severity


@dataclass(frozen=True)
class LintContext:
    """Shared state for one lint run.

    ``lessons`` holds every lesson of the corpus by name so link rules can
    look across files.
    """

    config: LessonKitConfig = field(default_factory=LessonKitConfig)
    lessons: Mapping[str, Lesson] = field(default_factory=dict)


RuleCheck = Callable[[Lesson, LintContext], Iterable[Finding]]


class Rule:
    def __init__(
        self,
        *,
        name: str,
        description: str,
        severity: Severity,
        check: RuleCheck,
    ) -> None:
        if severity not in ("error", "warning"):
            raise ValueError(f"Unknown severity: {severity}")
        self.name = name
        self.description = description
        self.severity = severity
        self.check = check
