"""Module entry point for python -m rental_lifecycle."""

from __future__ import annotations

from rental_lifecycle.app import main


if __name__ == "__main__":
    raise SystemExit(main())
