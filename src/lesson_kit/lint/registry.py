import logging

from .rule import Rule

logger = logging.getLogger(__name__)


class RuleRegistry:
    """Lint rules by name, kept in the order they run.

    Diagnostics are sorted after a run, but rule order still decides which
    rule reports first for a line and the order ``lesson-kit rules`` prints.
    """

    def __init__(self) -> None:
        self._rules: dict[str, Rule] = {}

    def register(self, rule: Rule, *, before: str | None = None) -> None:
        """Add a rule at the end of the run order, or just ahead of ``before``."""
        if rule.name in self._rules:
            raise ValueError(f"Rule '{rule.name}' already registered")

        if before is None:
            self._rules[rule.name] = rule
        else:
            self.get(before)
            ordered = list(self._rules.items())
            position = [name for name, _ in ordered].index(before)
            ordered.insert(position, (rule.name, rule))
            self._rules = dict(ordered)
        logger.debug("Registered rule: %s", rule.name)

    def get(self, name: str) -> Rule:
        try:
            return self._rules[name]
        except KeyError:
            logger.error("Rule not found: %s", name)
            raise KeyError(f"Rule '{name}' not found")

    def remove(self, name: str) -> None:
        try:
            del self._rules[name]
            logger.debug("Removed rule: %s", name)
        except KeyError:
            logger.error("Cannot remove rule, not found: %s", name)
            raise KeyError(f"Rule '{name}' not found")

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def list(self) -> dict[str, Rule]:
        """A copy of the rules in run order."""
        return dict(self._rules)
