import pytest

from collapsibletree.exceptions import MissingNodeReferenceError
from collapsibletree.hierarchy import HierarchyModel
from collapsibletree.layout import TreeLayoutEngine
from collapsibletree.node import Link, Node
from collapsibletree.reconcile import (
    ChangeSet,
    Phase,
    Reconciler,
    RenderSnapshot,
)
from collapsibletree.sample_data import TREE_DATA


class Cycle:
    """Runs layout + reconcile and commits immediately, without a scene."""

    def __init__(self, data, initial_depth=1):
        self.model = HierarchyModel.from_data(data, initial_depth=initial_depth)
        self.engine = TreeLayoutEngine(node_size=(25, 200))
        self.reconciler = Reconciler()
        self.snapshot = RenderSnapshot()

    def run(self, trigger_id, toggle=True, viewbox=None):
        trigger = self.model.get(trigger_id)
        if toggle:
            self.model.toggle(trigger)
        visible = self.model.visible_descendants()
        self.engine.apply(visible)
        transition = self.reconciler.reconcile(
            self.snapshot, visible, self.model.visible_links(visible), trigger, viewbox
        )
        self.model.commit()
        self.snapshot = transition.target
        return transition


def assert_partitions_exhaustive_and_disjoint(changes: ChangeSet, universe):
    entering = set(changes.ids(Phase.ENTER))
    persisting = set(changes.ids(Phase.UPDATE))
    exiting = set(changes.ids(Phase.EXIT))
    assert not entering & persisting
    assert not entering & exiting
    assert not persisting & exiting
    assert entering | persisting | exiting == set(universe)
    assert len(changes) == len(universe)


def test_first_render_enters_everything_from_the_root(eve_data):
    cycle = Cycle(eve_data)
    transition = cycle.run(0, toggle=False)
    assert transition.nodes.summary() == {
        "entering": [0, 1, 2],
        "persisting": [],
        "exiting": [],
    }
    assert transition.links.ids(Phase.ENTER) == [1, 2]
    for change in transition.nodes.entering:
        assert change.start == (0.0, 0.0)
        assert (change.start_opacity, change.end_opacity) == (0.0, 1.0)


def test_expand_reports_new_child_as_entering(eve_data):
    cycle = Cycle(eve_data)
    cycle.run(0, toggle=False)
    seth_before = cycle.model.get(2).position

    transition = cycle.run(2)
    assert transition.trigger_id == 2
    assert transition.nodes.summary() == {
        "entering": [3],
        "persisting": [0, 1, 2],
        "exiting": [],
    }
    assert transition.links.summary() == {
        "entering": [3],
        "persisting": [1, 2],
        "exiting": [],
    }
    (enos,) = transition.nodes.entering
    assert enos.start == seth_before
    assert enos.end == cycle.model.get(3).position
    (enos_link,) = transition.links.entering
    assert enos_link.start == (seth_before, seth_before)


def test_collapse_reports_child_as_exiting_towards_trigger(eve_data):
    cycle = Cycle(eve_data)
    cycle.run(0, toggle=False)
    cycle.run(2)
    enos_before = cycle.model.get(3).position

    transition = cycle.run(2)
    seth_after = cycle.model.get(2).position
    assert transition.nodes.summary() == {
        "entering": [],
        "persisting": [0, 1, 2],
        "exiting": [3],
    }
    (enos,) = transition.nodes.exiting
    assert enos.phase is Phase.EXIT
    assert enos.start == enos_before
    assert enos.end == seth_after
    assert (enos.start_opacity, enos.end_opacity) == (1.0, 0.0)
    (link,) = transition.links.exiting
    assert link.end == (seth_after, seth_after)
    assert 3 not in transition.target.nodes
    assert 3 in cycle.model


def test_persisting_nodes_move_from_committed_to_new_position():
    cycle = Cycle(TREE_DATA)
    cycle.run(0, toggle=False)
    before = {i: n.position for i, n in cycle.snapshot.nodes.items()}
    transition = cycle.run(2)
    for change in transition.nodes.persisting:
        assert change.start == before[change.id]
        assert change.end == cycle.model.get(change.id).position
    # expanding Seth pushes its right-hand siblings apart
    abel = next(c for c in transition.nodes.persisting if c.name == "Abel")
    assert abel.end[0] > abel.start[0]


def test_partitions_are_exhaustive_and_disjoint_over_many_toggles():
    cycle = Cycle(TREE_DATA)
    cycle.run(0, toggle=False)
    for node_id in (2, 6, 0, 0, 2, 6, 2):
        previous_nodes = set(cycle.snapshot.nodes)
        previous_links = set(cycle.snapshot.links)
        transition = cycle.run(node_id)
        current_nodes = set(transition.target.nodes)
        current_links = set(transition.target.links)
        assert_partitions_exhaustive_and_disjoint(
            transition.nodes, previous_nodes | current_nodes
        )
        assert_partitions_exhaustive_and_disjoint(
            transition.links, previous_links | current_links
        )


def test_link_to_invisible_parent_is_an_invariant_violation(eve_data):
    model = HierarchyModel.from_data(eve_data)
    TreeLayoutEngine().apply(model.visible_descendants())
    eve, cain, seth, enos = model.descendants()
    with pytest.raises(MissingNodeReferenceError):
        Reconciler().reconcile(
            RenderSnapshot(), [eve, cain, enos], [Link(seth, enos)], eve
        )


def test_viewbox_is_carried_from_previous_snapshot(eve_data):
    cycle = Cycle(eve_data)
    first = cycle.run(0, toggle=False, viewbox=(0, 0, 10, 10))
    assert first.viewbox_start == (0, 0, 10, 10)
    second = cycle.run(2, viewbox=(-5, 0, 20, 10))
    assert second.viewbox_start == (0, 0, 10, 10)
    assert second.viewbox_end == (-5, 0, 20, 10)


def test_snapshot_to_dict(eve_data):
    cycle = Cycle(eve_data)
    transition = cycle.run(0, toggle=False, viewbox=(1, 2, 3, 4))
    data = transition.target.to_dict()
    assert [n["name"] for n in data["nodes"]] == ["Eve", "Cain", "Seth"]
    assert data["nodes"][2]["collapsed"] is True
    assert data["links"] == [
        {"id": 1, "source": 0, "target": 1},
        {"id": 2, "source": 0, "target": 2},
    ]
    assert data["viewBox"] == [1, 2, 3, 4]


def test_empty_snapshot():
    assert RenderSnapshot().is_empty()
    node = Node(id=0, name="r", x=0.0, y=0.0)
    assert not RenderSnapshot.from_visible([node], []).is_empty()
