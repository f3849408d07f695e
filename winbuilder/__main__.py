"""Allow ``python -m winbuilder``."""
from __future__ import annotations

import sys

from .cli import main


if __name__ == "__main__":  # pragma: no cover - exercised via integration tests
    raise SystemExit(main(sys.argv[1:]))
