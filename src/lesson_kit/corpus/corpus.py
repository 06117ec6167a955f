import logging
from pathlib import Path

from lesson_kit.parsers.base import LessonParser
from lesson_kit.parsers.markdown_parser import MarkdownParser
from lesson_kit.parsers.models import Lesson

logger = logging.getLogger(__name__)


class LessonCorpus:
    """Every lesson file of one directory, parsed up front.

    Lessons are keyed by file stem and listed in file-name order.
    """

    def __init__(
        self,
        directory: str | Path,
        parser: LessonParser | None = None,
        pattern: str = "*.md",
    ) -> None:
        self.directory = Path(directory)
        self._parser = parser or MarkdownParser()
        self._lessons: dict[str, Lesson] = {}
        logger.info("Initializing LessonCorpus from directory: %s", directory)
        if not self.directory.is_dir():
            raise FileNotFoundError(f"Lesson directory '{directory}' does not exist")
        self._load_all(pattern)
        logger.info("Loaded %d lessons", len(self._lessons))

    def get(self, name: str) -> Lesson:
        logger.debug("Getting lesson: %s", name)
        try:
            return self._lessons[name]
        except KeyError:
            logger.error("Lesson not found: %s", name)
            raise KeyError(f"Lesson '{name}' not found")

    def lessons(self) -> list[Lesson]:
        return list(self._lessons.values())

    def __len__(self) -> int:
        return len(self._lessons)

    # kept after the list[...] annotations above, which this name would shadow
    def list(self) -> list[str]:
        return list(self._lessons.keys())

    def _load_all(self, pattern: str) -> None:
        for file_path in sorted(self.directory.glob(pattern)):
            if not file_path.is_file():
                continue
            lesson = self._parser.parse(file_path)
            self._lessons[lesson.name] = lesson
            logger.debug(
                "Loaded lesson: %s (%d sections) from %s",
                lesson.name,
                len(lesson.sections),
                file_path,
            )
