import os
from collections.abc import Callable
from typing import Any

import pytest

from basil.basil_eval import run_source

# Start coverage in subprocesses spawned by the CLI tests
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    # Nukes the teardown assertion that fails in act
    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop


@pytest.fixture  # type: ignore[misc]
def run_lines() -> Callable[[str], list[str]]:
    """Runs a source string and returns the printed lines."""

    def _run(source: str) -> list[str]:
        return run_source(source).lines

    return _run
