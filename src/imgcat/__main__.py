"""Allow ``python -m imgcat``."""

from __future__ import annotations

from imgcat.cli import main

if __name__ == "__main__":
    main()
