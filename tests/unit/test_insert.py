# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

from typing import Callable

import pytest

from coreason_flowtree.core.model import BranchExits, NodeKind, Workflow
from coreason_flowtree.engine.mutations import check_insert, insert_node
from coreason_flowtree.engine.topology import TopologyEngine
from tests.helpers import make_node, make_workflow, successor_chain


@pytest.fixture  # type: ignore[misc]
def topology() -> TopologyEngine:
    return TopologyEngine()


def test_insert_into_empty_slot(workflow: Workflow, id_factory: Callable[[], str]) -> None:
    result = insert_node(workflow, "n1", None, "action", id_factory=id_factory)

    assert result is not workflow
    assert result.nodes["n1"].children == ("n2",)
    assert result.nodes["n2"].parent_id == "n1"
    assert result.nodes["n2"].label == "Action"
    assert result.nodes["n2"].children == ()


def test_insert_splice_keeps_downstream_chain(
    workflow: Workflow, id_factory: Callable[[], str], topology: TopologyEngine
) -> None:
    """S -> End, then insert an action after S: S -> Action -> End."""
    with_end = insert_node(workflow, "n1", None, "end", id_factory=id_factory)
    result = insert_node(with_end, "n1", None, "action", id_factory=id_factory)

    assert successor_chain(result) == ["start", "action", "end"]
    assert result.nodes["n1"].children == ("n3",)
    assert result.nodes["n3"].children == ("n2",)
    assert result.nodes["n2"].parent_id == "n3"
    topology.validate_workflow(result)


def test_insert_branch_attaches_prior_child_to_true_exit(
    workflow: Workflow, id_factory: Callable[[], str], topology: TopologyEngine
) -> None:
    with_action = insert_node(workflow, "n1", None, "action", id_factory=id_factory)
    result = insert_node(with_action, "n1", None, "branch", id_factory=id_factory)

    branch = result.nodes["n3"]
    assert branch.kind == NodeKind.BRANCH
    assert branch.exits == BranchExits(true="n2", false=None)
    assert branch.children == ("n2",)
    assert result.nodes["n2"].parent_id == "n3"
    topology.validate_workflow(result)


def test_insert_into_branch_exits(workflow: Workflow, id_factory: Callable[[], str], topology: TopologyEngine) -> None:
    wf = insert_node(workflow, "n1", None, "branch", id_factory=id_factory)
    wf = insert_node(wf, "n2", "false", "end", label="No", id_factory=id_factory)
    wf = insert_node(wf, "n2", "true", "action", label="Yes", id_factory=id_factory)

    branch = wf.nodes["n2"]
    assert branch.exits == BranchExits(true="n4", false="n3")
    assert branch.children == ("n4", "n3")
    assert wf.nodes["n3"].label == "No"
    assert wf.nodes["n4"].parent_id == "n2"
    topology.validate_workflow(wf)


def test_insert_end_before_chain_prunes_downstream(
    workflow: Workflow, id_factory: Callable[[], str], topology: TopologyEngine
) -> None:
    """S -> A -> B -> End; inserting End after S removes A, B and the old End."""
    wf = insert_node(workflow, "n1", None, "end", id_factory=id_factory)
    wf = insert_node(wf, "n1", None, "action", id_factory=id_factory)
    wf = insert_node(wf, "n3", None, "action", id_factory=id_factory)
    assert successor_chain(wf) == ["start", "action", "action", "end"]

    result = insert_node(wf, "n1", None, "end", id_factory=id_factory)

    assert set(result.nodes) == {"n1", "n5"}
    assert result.nodes["n1"].children == ("n5",)
    assert result.nodes["n5"].children == ()
    topology.validate_workflow(result)


def test_insert_end_into_branch_exit_prunes_only_that_subtree(
    workflow: Workflow, id_factory: Callable[[], str], topology: TopologyEngine
) -> None:
    wf = insert_node(workflow, "n1", None, "branch", id_factory=id_factory)
    wf = insert_node(wf, "n2", "true", "action", id_factory=id_factory)
    wf = insert_node(wf, "n3", None, "end", id_factory=id_factory)
    wf = insert_node(wf, "n2", "false", "action", id_factory=id_factory)

    result = insert_node(wf, "n2", "true", "end", id_factory=id_factory)

    assert set(result.nodes) == {"n1", "n2", "n5", "n6"}
    assert result.nodes["n2"].exits == BranchExits(true="n6", false="n5")
    topology.validate_workflow(result)


def test_insert_trims_label(workflow: Workflow, id_factory: Callable[[], str]) -> None:
    result = insert_node(workflow, "n1", None, "action", label="  Send email  ", id_factory=id_factory)
    assert result.nodes["n2"].label == "Send email"


def test_insert_does_not_touch_previous_snapshot(workflow: Workflow, id_factory: Callable[[], str]) -> None:
    before_nodes = dict(workflow.nodes)
    insert_node(workflow, "n1", None, "action", id_factory=id_factory)

    assert workflow.nodes == before_nodes
    assert workflow.nodes["n1"].children == ()


@pytest.mark.parametrize(
    "parent_id, slot, kind, label",
    [
        ("missing", None, "action", None),
        ("", None, "action", None),
        ("n1", "true", "action", None),
        ("n1", None, "start", None),
        ("n1", None, "loop", None),
        ("n1", None, "action", "   "),
    ],
)  # type: ignore[misc]
def test_invalid_insert_is_a_noop(
    workflow: Workflow, id_factory: Callable[[], str], parent_id: str, slot: str, kind: str, label: str
) -> None:
    assert check_insert(workflow, parent_id, slot, kind, label) is not None
    assert insert_node(workflow, parent_id, slot, kind, label, id_factory=id_factory) is workflow


def test_insert_under_end_is_a_noop(workflow: Workflow, id_factory: Callable[[], str]) -> None:
    wf = insert_node(workflow, "n1", None, "end", id_factory=id_factory)
    assert check_insert(wf, "n2", None, "action") == "end nodes have no outgoing slot"
    assert insert_node(wf, "n2", None, "action", id_factory=id_factory) is wf


def test_insert_into_branch_without_slot_is_a_noop(workflow: Workflow, id_factory: Callable[[], str]) -> None:
    wf = insert_node(workflow, "n1", None, "branch", id_factory=id_factory)
    assert insert_node(wf, "n2", None, "action", id_factory=id_factory) is wf


def test_insert_with_colliding_id_is_a_noop(workflow: Workflow) -> None:
    assert insert_node(workflow, "n1", None, "action", id_factory=lambda: "n1") is workflow


def test_insert_into_hand_built_workflow() -> None:
    wf = make_workflow(
        make_node("S", "start", children=("E",)),
        make_node("E", "end", parent_id="S"),
    )
    result = insert_node(wf, "S", None, NodeKind.ACTION, id_factory=lambda: "A")

    assert successor_chain(result) == ["start", "action", "end"]
    assert result.nodes["E"].parent_id == "A"
    assert wf.nodes["E"].parent_id == "S"
