"""Windows Store and Windows Phone platform builder."""
from __future__ import annotations

from .cli import main

__all__ = ["main"]
