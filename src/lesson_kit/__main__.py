"""Module entrypoint for `python -m lesson_kit`."""

from .cli import main_entry


def main() -> None:
    main_entry()


if __name__ == "__main__":  # pragma: no cover
    main()
