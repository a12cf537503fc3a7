import pytest

from pipeflow.model.network import CapacitatedGraph


@pytest.fixture
def pipes4():
    # Capacity:
    #        [10]       [4]
    #    A ──────► B ──────► D
    #    │         │         ▲
    #    │[10]     │[2]      │[9]
    #    ▼         ▼         │
    #    C ◄───────┘         │
    #    └───────────────────┘
    g = CapacitatedGraph()
    for name in "ABCD":
        g.add_node(name)
    g.add_arc("A", "B", 10, arc_id="ab")
    g.add_arc("A", "C", 10, arc_id="ac")
    g.add_arc("B", "C", 2, arc_id="bc")
    g.add_arc("B", "D", 4, arc_id="bd")
    g.add_arc("C", "D", 9, arc_id="cd")
    return g


@pytest.fixture
def disconnected2():
    g = CapacitatedGraph()
    g.add_node("A")
    g.add_node("B")
    return g


@pytest.fixture
def cancel7():
    # The first (shortest) path S-A-B-T blocks both longer routes; the second
    # augmentation must cancel the flow on A->B.
    #
    #    S ──► A ──► B ──► T
    #    │     │     ▲     ▲
    #    ▼     ▼     │     │
    #    C ────┼─────┘     │
    #          D ──► E ────┘
    #
    # All capacities are 1.
    return CapacitatedGraph.from_arcs(
        [
            ("S", "A", 1),
            ("A", "B", 1),
            ("B", "T", 1),
            ("S", "C", 1),
            ("C", "B", 1),
            ("A", "D", 1),
            ("D", "E", 1),
            ("E", "T", 1),
        ]
    )


@pytest.fixture
def antiparallel6():
    # Same shape as cancel7 but B->A is a real arc (capacity 1) and the lower
    # routes carry 2, so the second augmentation walks B->A with bottleneck 2.
    return CapacitatedGraph.from_arcs(
        [
            ("S", "A", 1),
            ("A", "B", 1),
            ("B", "T", 1),
            ("S", "C", 2),
            ("C", "B", 2),
            ("B", "A", 1),
            ("A", "D", 2),
            ("D", "T", 2),
        ]
    )


@pytest.fixture
def clrs6():
    # Classic textbook network, max flow 23.
    return CapacitatedGraph.from_arcs(
        [
            ("s", "v1", 16),
            ("s", "v2", 13),
            ("v2", "v1", 4),
            ("v1", "v3", 12),
            ("v3", "v2", 9),
            ("v2", "v4", 14),
            ("v4", "v3", 7),
            ("v3", "t", 20),
            ("v4", "t", 4),
        ]
    )
