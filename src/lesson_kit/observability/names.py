# src/lesson_kit/observability/names.py

"""Standard metric names for lesson-kit observability.

Use these constants instead of hardcoded strings.

Note: All duration metrics are in milliseconds by convention.
"""

# ============================================================================
# Parser Metrics
# ============================================================================

# Duration
LESSON_PARSE_DURATION = "lesson_parse_duration"

# Counters
LESSONS_PARSED_TOTAL = "lessons_parsed_total"
UNCLOSED_FENCES_TOTAL = "unclosed_fences_total"

# Gauges
LESSON_SECTIONS = "lesson_sections"


# ============================================================================
# ToC Metrics
# ============================================================================

# Duration
TOC_GENERATE_DURATION = "toc_generate_duration"

# Counters
TOC_UPDATES_TOTAL = "toc_updates_total"


# ============================================================================
# Lint Metrics
# ============================================================================

# Duration
LINT_DURATION = "lint_duration"

# Counters
LINT_LESSONS_TOTAL = "lint_lessons_total"
LINT_DIAGNOSTICS_TOTAL = "lint_diagnostics_total"
