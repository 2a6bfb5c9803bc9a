"""Module entry point for `python -m form_sheet_sync`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
