"""Shared snapshot fixtures.

Snapshots are plain dicts shaped like the messages a controller sends, so
every test builds its Graph the same way a view does.
"""

import pytest

from algoviz.events.channel import MemoryChannel

# =============================================================================
# Snapshots
# =============================================================================


def csp_snapshot():
    """Two variables sharing one constraint, plus a unary constraint on B."""
    return {
        "nodes": [
            {"id": "A", "name": "A", "type": "variable", "domain": [1, 2, 3]},
            {"id": "B", "name": "B", "type": "variable", "domain": [1, 2]},
            {"id": "c0", "name": "A < B", "type": "constraint", "idx": 0},
            {"id": "c1", "name": "B != 1", "type": "constraint", "idx": 1},
        ],
        "edges": [
            {"id": "e1", "source": "A", "target": "c0"},
            {"id": "e2", "source": "c0", "target": "B"},
            {"id": "e3", "source": "B", "target": "c1"},
        ],
    }


def search_snapshot():
    return {
        "nodes": [
            {"id": "s", "name": "start", "type": "start", "h": 4},
            {"id": "m", "name": "mid", "h": 2.0},
            {"id": "g", "name": "goal", "type": "goal", "h": 0},
        ],
        "edges": [
            {"id": "sm", "source": "s", "target": "m", "cost": 2},
            {"id": "mg", "source": "m", "target": "g", "cost": 1.5},
            {"id": "sg", "source": "s", "target": "g", "cost": 5.0},
        ],
    }


def bayes_snapshot():
    """Burglary/earthquake alarm network."""
    return {
        "nodes": [
            {"id": "B", "name": "Burglary"},
            {"id": "E", "name": "Earthquake", "observed": True},
            {"id": "A", "name": "Alarm"},
            {"id": "J", "name": "JohnCalls"},
            {"id": "M", "name": "MaryCalls"},
        ],
        "edges": [
            {"id": "BA", "source": "B", "target": "A"},
            {"id": "EA", "source": "E", "target": "A"},
            {"id": "AJ", "source": "A", "target": "J"},
            {"id": "AM", "source": "A", "target": "M"},
        ],
    }


def positioned_snapshot():
    return {
        "nodes": [
            {"id": "a", "name": "a", "x": 100.0, "y": 120.0},
            {"id": "b", "name": "b", "x": 300.0, "y": 80.0},
            {"id": "c", "name": "c", "x": 200.0, "y": 400.0},
        ],
        "edges": [
            {"id": "ab", "source": "a", "target": "b"},
            {"id": "bc", "source": "b", "target": "c"},
        ],
    }


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def channel():
    return MemoryChannel()


@pytest.fixture
def csp():
    return csp_snapshot()


@pytest.fixture
def search():
    return search_snapshot()


@pytest.fixture
def bayes():
    return bayes_snapshot()


@pytest.fixture
def positioned():
    return positioned_snapshot()
