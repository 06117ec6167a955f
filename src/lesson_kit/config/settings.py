# src/lesson_kit/config/settings.py

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "lesson-kit.yaml"


class TocSettings(BaseModel):
    """Defaults for ToC blocks that do not carry their own options."""

    depth_from: int = Field(default=2, ge=1, le=6)
    depth_to: int = Field(default=6, ge=1, le=6)
    ordered_list: bool = False
    indent: str = "\t"

    class Config:
        extra = "forbid"

    @model_validator(mode="after")
    def _check_depth_range(self) -> "TocSettings":
        if self.depth_from > self.depth_to:
            raise ValueError("depth_from must be <= depth_to")
        return self


class LintSettings(BaseModel):
    disabled_rules: list[str] = Field(default_factory=list)
    severity_overrides: dict[str, Literal["error", "warning"]] = Field(
        default_factory=dict
    )
    # fence info strings that mark an expected-output block
    output_languages: list[str] = Field(
        default_factory=lambda: ["", "text", "output", "console"]
    )

    class Config:
        extra = "forbid"


class LessonKitConfig(BaseModel):
    toc: TocSettings = Field(default_factory=TocSettings)
    lint: LintSettings = Field(default_factory=LintSettings)

    class Config:
        extra = "forbid"

    @classmethod
    def load(cls, path: str | Path) -> "LessonKitConfig":
        """Load config from a YAML file.

        Missing sections take their defaults. Unknown keys raise
        ``pydantic.ValidationError``.
        """
        logger.info("Loading config from %s", path)
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file '{path}' must contain a mapping")
        return cls(**data)


def find_config(start: str | Path) -> Path | None:
    """Return the ``lesson-kit.yaml`` next to ``start``, if there is one."""
    directory = Path(start)
    if not directory.is_dir():
        directory = directory.parent
    candidate = directory / CONFIG_FILENAME
    if candidate.is_file():
        logger.debug("Found config file: %s", candidate)
        return candidate
    return None
