# parsers/base.py

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TextIO

from .models import Lesson


class LessonParser(ABC):
    @abstractmethod
    def parse(
        self, source: str | Path | TextIO, *, name: str | None = None
    ) -> Lesson:
        """
        Parse a lesson and return a structured, deterministic representation.

        Requirements:
        - Deterministic output for same input
        - Line numbers are 1-based and file-global
        - Structural problems are recorded, never raised
        """
        raise NotImplementedError
