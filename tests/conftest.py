from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

# `tests.support` is imported as a package from the repository root.
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from tests.support.harness import KstValue, Session, recording_session  # noqa: E402


@pytest.fixture
def session() -> Session:
    """A fresh interpreter session with only the global bindings."""
    return Session()


@pytest.fixture
def recorder() -> Tuple[Session, List[KstValue]]:
    """Session plus the list of values its `catat` native has seen, in call order."""
    return recording_session()


def pytest_collection_modifyitems(items: List[pytest.Item]) -> None:
    """Scenario ids must stay unique across the parametrized tables."""
    seen: Dict[str, int] = {}
    for item in items:
        seen[item.nodeid] = seen.get(item.nodeid, 0) + 1

    duplicates = sorted(nodeid for nodeid, count in seen.items() if count > 1)
    if duplicates:
        lines = "\n".join(f"- {nodeid}" for nodeid in duplicates)
        raise pytest.UsageError(f"Duplicate scenario ids:\n{lines}")
