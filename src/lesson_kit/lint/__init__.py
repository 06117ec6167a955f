from .diagnostic import Diagnostic, Finding, Severity, has_errors
from .engine import Linter
from .registry import RuleRegistry
from .rule import LintContext, Rule
from .rules import BUILTIN_RULES, default_registry

__all__ = [
    "BUILTIN_RULES",
    "Diagnostic",
    "Finding",
    "LintContext",
    "Linter",
    "Rule",
    "RuleRegistry",
    "Severity",
    "default_registry",
    "has_errors",
]
