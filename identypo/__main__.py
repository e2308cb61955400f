from __future__ import annotations

from .typo_check.typo_check import main

if __name__ == "__main__":
    raise SystemExit(main())
