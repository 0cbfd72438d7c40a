"""Entry point for `python -m fieldaudit`.

Usage:
    python -m fieldaudit
    uv run python -m fieldaudit
"""

from __future__ import annotations

from fieldaudit.app import run

run()
