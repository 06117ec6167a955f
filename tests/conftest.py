import pytest

from lesson_kit.parsers.markdown_parser import MarkdownParser
from lesson_kit.parsers.models import Lesson

SAMPLE_LESSON = """# Python Dictionaries

<!-- TOC depthFrom:2 -->

- [Part A: Intro to Dicts](#part-a-intro-to-dicts)
- [Part B: Looping](#part-b-looping)
\t- [Nested Dicts](#nested-dicts)

<!-- /TOC -->

Dictionaries map keys to values.

## Part A: Intro to Dicts

Create a dict with braces. See [Part B](#part-b-looping).

```py
ages = {"ann": 31}
print(ages["ann"])
```

Output:

```
31
```

## Part B: Looping

```py
for key in ages:
    print(key)
```

### Nested Dicts

Values can be dicts too.
"""


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_LESSON


@pytest.fixture
def parser() -> MarkdownParser:
    return MarkdownParser()


@pytest.fixture
def sample_lesson(parser: MarkdownParser, sample_text: str) -> Lesson:
    return parser.parse_text(sample_text, name="dictionaries")
