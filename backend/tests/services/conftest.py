"""Service test fixtures — outbox helpers for reader sessions.

Invariants:
    - No test touches disk or network: libraries come from the root conftest's
      scripted fetchers
"""

import pytest


def drain(queue) -> list[dict]:
    items = []
    while not queue.empty():
        items.append(queue.get_nowait())
    return items


@pytest.fixture
def drain_outbox():
    return drain
