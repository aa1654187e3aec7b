import pytest

from collapsibletree.exceptions import (
    DuplicateNodeIdError,
    HierarchyConstructionError,
    UnknownNodeError,
)
from collapsibletree.hierarchy import HierarchyModel
from collapsibletree.node import Node
from collapsibletree.sample_data import TREE_DATA


def names(nodes):
    return [n.name for n in nodes]


def create_deep_tree():
    r"""
         A
        / \
       B   C
      / \   \
     D   E   F
     |
     G
    """
    return {
        "name": "A",
        "children": [
            {
                "name": "B",
                "children": [
                    {"name": "D", "children": [{"name": "G"}]},
                    {"name": "E"},
                ],
            },
            {"name": "C", "children": [{"name": "F"}]},
        ],
    }


# 1. Construction
def test_ids_are_assigned_in_preorder(eve_data):
    model = HierarchyModel.from_data(eve_data)
    assert [(n.id, n.name) for n in model.descendants()] == [
        (0, "Eve"),
        (1, "Cain"),
        (2, "Seth"),
        (3, "Enos"),
    ]


def test_depth_and_parent_links(eve_data):
    model = HierarchyModel.from_data(eve_data)
    eve, cain, seth, enos = model.descendants()
    assert [n.depth for n in (eve, cain, seth, enos)] == [0, 1, 1, 2]
    assert eve.parent is None
    assert cain.parent is eve
    assert enos.parent is seth
    assert seth.all_children == (enos,)


def test_payload_is_carried_in_data():
    model = HierarchyModel.from_data(TREE_DATA)
    root = model.root
    assert root.data == {"name": "Eve", "value": 15, "type": "black", "level": "yellow"}
    assert model.get(3).data["level"] == "purple"
    assert "children" not in model.get(2).data


def test_initial_depth_collapses_deeper_nodes(eve_data):
    model = HierarchyModel.from_data(eve_data, initial_depth=1)
    assert names(model.visible_descendants()) == ["Eve", "Cain", "Seth"]
    assert model.get(2).has_hidden_children
    assert not model.get(1).has_hidden_children


def test_no_initial_depth_expands_everything(eve_data):
    model = HierarchyModel.from_data(eve_data)
    assert names(model.visible_descendants()) == ["Eve", "Cain", "Seth", "Enos"]


@pytest.mark.parametrize(
    "data",
    [
        {"children": []},
        {"name": 3},
        {"name": "root", "children": "Cain"},
        {"name": "root", "children": [{"name": "ok"}, ["not", "a", "record"]]},
        ["not", "a", "record"],
    ],
)
def test_malformed_input_is_rejected(data):
    with pytest.raises(HierarchyConstructionError):
        HierarchyModel.from_data(data)


def test_self_containing_record_is_rejected():
    record = {"name": "Loop"}
    record["children"] = [{"name": "Inner", "children": [record]}]
    with pytest.raises(HierarchyConstructionError, match="contains itself"):
        HierarchyModel.from_data(record)


def test_shared_record_in_two_branches_is_not_a_cycle():
    shared = {"name": "Shared"}
    model = HierarchyModel.from_data(
        {"name": "Root", "children": [{"name": "A", "children": [shared]}, shared]}
    )
    assert names(model) == ["Root", "A", "Shared", "Shared"]
    assert len({n.id for n in model}) == 4


def test_duplicate_ids_are_rejected():
    root = Node(id=0, name="root")
    a = Node(id=1, name="a", depth=1)
    b = Node(id=1, name="b", depth=1)
    a.parent = root
    b.parent = root
    root.all_children = (a, b)
    with pytest.raises(DuplicateNodeIdError):
        HierarchyModel(root, [root, a, b])


def test_unknown_id_raises(eve_data):
    model = HierarchyModel.from_data(eve_data)
    with pytest.raises(UnknownNodeError):
        model.get(42)
    with pytest.raises(KeyError):
        model.toggle(42)
    assert 3 in model
    assert 42 not in model


# 2. Visibility
def test_visible_descendants_include_root_once_and_skip_collapsed_subtrees():
    model = HierarchyModel.from_data(create_deep_tree())
    model.toggle(model.get(1))  # collapse B
    visible = model.visible_descendants()
    assert names(visible) == ["A", "B", "C", "F"]
    assert names(visible).count("A") == 1

    model.toggle(4)  # collapse C
    assert names(model.visible_descendants()) == ["A", "B", "C"]


def test_collapsed_ancestor_hides_expanded_descendants():
    model = HierarchyModel.from_data(create_deep_tree())
    d = model.get(2)
    assert d.expanded
    model.toggle(1)
    assert d.expanded
    assert d not in model.visible_descendants()
    assert model.get(3) not in model.visible_descendants()


def test_visible_links_pair_each_non_root_node_with_its_parent(eve_data):
    model = HierarchyModel.from_data(eve_data)
    links = model.visible_links()
    assert [(link.source.name, link.target.name) for link in links] == [
        ("Eve", "Cain"),
        ("Eve", "Seth"),
        ("Seth", "Enos"),
    ]
    assert [link.id for link in links] == [1, 2, 3]


def test_toggle_root_only_hides_children(eve_data):
    model = HierarchyModel.from_data(eve_data)
    assert model.toggle(model.root) is model
    assert model.visible_descendants() == [model.root]
    assert model.visible_links() == []


def test_toggle_leaf_is_a_noop(eve_data):
    model = HierarchyModel.from_data(eve_data)
    before = names(model.visible_descendants())
    cain = model.get(1)
    assert model.toggle(cain) is model
    assert cain.expanded
    assert names(model.visible_descendants()) == before


def test_toggle_twice_restores_visible_set(eve_data):
    model = HierarchyModel.from_data(eve_data, initial_depth=1)
    before = [n.id for n in model.visible_descendants()]
    model.toggle(2)
    assert [n.id for n in model.visible_descendants()] == [0, 1, 2, 3]
    model.toggle(2)
    assert [n.id for n in model.visible_descendants()] == before


def test_ids_and_children_never_change_across_toggles():
    model = HierarchyModel.from_data(TREE_DATA, initial_depth=1)
    identity = {id(n): (n.id, n.depth, n.all_children) for n in model}
    for node_id in (2, 5, 0, 2, 0, 5):
        model.toggle(node_id)
        assert {id(n): (n.id, n.depth, n.all_children) for n in model} == identity


def test_toggle_rejects_foreign_node(eve_data):
    model = HierarchyModel.from_data(eve_data)
    other = HierarchyModel.from_data(eve_data)
    with pytest.raises(UnknownNodeError):
        model.toggle(other.get(2))


# 3. Commit
def test_commit_copies_positions_of_visible_nodes_only(eve_data):
    model = HierarchyModel.from_data(eve_data, initial_depth=1)
    for i, node in enumerate(model):
        node.x, node.y = float(i), float(10 * i)
    model.commit()
    for node in model.visible_descendants():
        assert (node.x0, node.y0) == (node.x, node.y)
    enos = model.get(3)
    assert enos.previous_position is None
