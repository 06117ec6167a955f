from pathlib import Path

import pytest

from lesson_kit.corpus.corpus import LessonCorpus

DICTIONARIES = """# Python Dictionaries

<!-- TOC depthFrom:2 -->

- [Part A: Intro to Dicts](#part-a-intro-to-dicts)
- [Part B: Dict Methods](#part-b-dict-methods)

<!-- /TOC -->

Read [decorators](decorators.md) next.

## Part A: Intro to Dicts

```py
ages = {"ann": 31, "bob": 27}
print(ages["bob"])
```

```
27
```

## Part B: Dict Methods

`get` returns a default instead of raising, see [Part A](#part-a-intro-to-dicts).

```py
print(ages.get("cy", 0))
```

```
0
```
"""

DECORATORS = """# Decorators

<!-- TOC depthFrom:2 -->

- [Part A: Functions Are Objects](#part-a-functions-are-objects)
- [Part B: Writing a Decorator](#part-b-writing-a-decorator)

<!-- /TOC -->

Builds on [dict methods](dictionaries.md#part-b-dict-methods).

## Part A: Functions Are Objects

```py
def greet():
    return "hi"

say = greet
print(say())
```

```
hi
```

## Part B: Writing a Decorator

```py
def shout(func):
    def wrapper():
        return func().upper()
    return wrapper

@shout
def greet():
    return "hi"

print(greet())
```

```
HI
```
"""


def _write_corpus(directory: Path) -> Path:
    (directory / "dictionaries.md").write_text(DICTIONARIES, encoding="utf-8")
    (directory / "decorators.md").write_text(DECORATORS, encoding="utf-8")
    (directory / "notes.txt").write_text("not a lesson\n", encoding="utf-8")
    return directory


@pytest.fixture(scope="module")
def corpus_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Create the lesson files once per module."""
    return _write_corpus(tmp_path_factory.mktemp("lessons"))


@pytest.fixture(scope="module")
def corpus(corpus_dir: Path) -> LessonCorpus:
    """Load the corpus once, reuse across tests."""
    return LessonCorpus(corpus_dir)


@pytest.fixture
def writable_corpus_dir(tmp_path: Path) -> Path:
    """A fresh copy for tests that edit lesson files."""
    return _write_corpus(tmp_path)
