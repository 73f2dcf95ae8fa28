"""Behaviour tests for the all-or-nothing publish gate.

The scenarios build a three-page site under ``tmp_path`` and run the whole
pipeline. A clean run publishes every fragment; a single failing page,
whether from an injection pattern or a missing content file, leaves the
output directory untouched.

Usage
-----
Run ``pytest tests/bdd/test_publish_gate.py -v``.
"""

from __future__ import annotations

from pathlib import Path

from pytest_bdd import scenarios

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "publish_gate.feature"
scenarios(FEATURE_FILE)
