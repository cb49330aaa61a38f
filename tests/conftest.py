"""Global pytest configuration.

Registers the shared graph fixtures in `tests.sample_graphs` as a plugin so
pytest imports it with assertion rewriting enabled.
"""

from __future__ import annotations

from importlib.util import find_spec

pytest_plugins: list[str] = []
if find_spec("tests.sample_graphs") is not None:
    pytest_plugins = ["tests.sample_graphs"]
