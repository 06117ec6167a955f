from .settings import (
    CONFIG_FILENAME,
    LessonKitConfig,
    LintSettings,
    TocSettings,
    find_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "LessonKitConfig",
    "LintSettings",
    "TocSettings",
    "find_config",
]
