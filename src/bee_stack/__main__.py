"""Module entrypoint so the launcher runs via ``python -m bee_stack``."""

from .cli import main


if __name__ == "__main__":  # pragma: no cover - thin wrapper
    raise SystemExit(main())
