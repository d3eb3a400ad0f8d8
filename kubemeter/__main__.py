"""Entry point for `python -m kubemeter`.

Usage:
    python -m kubemeter
"""

from __future__ import annotations

from kubemeter.app import run

run()
