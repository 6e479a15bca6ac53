"""Scan and lint masteryls quiz blocks embedded in markdown course documents."""
from __future__ import annotations

__version__ = "0.1.0"
