import os
from typing import Any

import pytest

import bangu.bangu_repl
from bangu.bangu_uimap import ALIASES_ENV_VAR, UserInterfaceMapper

# Monkeypatch coverage to bypass teardown crash in act/docker
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop


@pytest.fixture(autouse=True)  # type: ignore[misc]
def fresh_session_aliases(monkeypatch: pytest.MonkeyPatch) -> None:
    """Each test starts with canonical aliases and no alias file in the environment."""
    monkeypatch.setattr(bangu.bangu_repl, "uimap", UserInterfaceMapper.from_canonical())
    monkeypatch.delenv(ALIASES_ENV_VAR, raising=False)
