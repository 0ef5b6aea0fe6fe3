from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Set

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

DEBUG_ENV_FLAGS = ("ERGOLAS_DEBUG_PY_TRACE", "ERGOLAS_DEBUG_PARSE")


@pytest.fixture(autouse=True)
def _quiet_debug_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test as if the debug environment flags were unset."""
    for name in DEBUG_ENV_FLAGS:
        monkeypatch.delenv(name, raising=False)


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Parametrized case ids must stay unique across the suite."""
    del session, config

    seen: Set[str] = set()
    duplicates: Set[str] = set()
    for item in items:
        if item.nodeid in seen:
            duplicates.add(item.nodeid)
        seen.add(item.nodeid)

    if duplicates:
        lines = "\n".join(f"- {nodeid}" for nodeid in sorted(duplicates))
        raise pytest.UsageError(f"Duplicate test ids:\n{lines}")
