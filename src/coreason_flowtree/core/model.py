# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

import uuid
from enum import Enum
from typing import Callable, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

Slot = Optional[Literal["true", "false"]]

BRANCH_EXIT_KEYS: Tuple[str, str] = ("true", "false")


class NodeKind(str, Enum):
    START = "start"
    ACTION = "action"
    BRANCH = "branch"
    END = "end"


# START is never insertable: the root is the only start node.
INSERTABLE_KINDS: Tuple[NodeKind, ...] = (NodeKind.ACTION, NodeKind.BRANCH, NodeKind.END)

_DEFAULT_LABELS: Dict[NodeKind, str] = {
    NodeKind.START: "Start",
    NodeKind.ACTION: "Action",
    NodeKind.BRANCH: "Branch",
    NodeKind.END: "End",
}


class InvalidSlotError(ValueError):
    """Raised when a slot does not exist on a node of the given kind."""

    pass


class BranchExits(BaseModel):
    """
    The two labeled outgoing edges of a branch node.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    true: Optional[str] = None
    false: Optional[str] = None


class Node(BaseModel):
    """
    A single step in the workflow tree.

    ``children`` is the generic successor view. For branch nodes it is always
    derived from ``exits`` and never written on its own.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    id: str
    kind: NodeKind
    label: str = Field(min_length=1)
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    children: Tuple[str, ...] = ()
    exits: Optional[BranchExits] = None


class Workflow(BaseModel):
    """
    The normalized workflow: an id-keyed store of nodes plus the root id.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    nodes: Dict[str, Node]
    root_id: str = Field(alias="rootId")

    def get(self, node_id: Optional[str]) -> Optional[Node]:
        if node_id is None:
            return None
        return self.nodes.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    @property
    def root(self) -> Node:
        return self.nodes[self.root_id]


def create_id() -> str:
    return str(uuid.uuid4())


def default_label_for_kind(kind: NodeKind) -> str:
    return _DEFAULT_LABELS.get(NodeKind(kind), "Node")


def coerce_kind(kind: object) -> Optional[NodeKind]:
    """Returns the NodeKind for ``kind`` or None if it names no known kind."""
    try:
        return NodeKind(kind)
    except (TypeError, ValueError):
        return None


def derive_children(node: Node) -> Node:
    """Recomputes ``children`` from the node's outgoing edge data.

    Branch nodes get both exit keys materialized and ``children`` set to the
    present exits, true first. Other kinds keep at most one child, end nodes none.
    """
    if node.kind == NodeKind.BRANCH:
        exits = node.exits or BranchExits()
        children = tuple(child_id for child_id in (exits.true, exits.false) if child_id)
        return node.model_copy(update={"exits": exits, "children": children})

    capacity = 0 if node.kind == NodeKind.END else 1
    return node.model_copy(update={"children": tuple(node.children[:capacity]), "exits": None})


def get_available_slots(node: Node) -> List[Slot]:
    if node.kind == NodeKind.BRANCH:
        return list(BRANCH_EXIT_KEYS)  # type: ignore[arg-type]
    if node.kind == NodeKind.END:
        return []
    return [None]


def slot_fits(node: Node, slot: object) -> bool:
    """True if ``slot`` is a valid outgoing position on ``node``."""
    if node.kind == NodeKind.BRANCH:
        return slot in BRANCH_EXIT_KEYS
    return slot is None


def _require_slot(node: Node, slot: object) -> None:
    if not slot_fits(node, slot):
        raise InvalidSlotError(f"Slot {slot!r} does not exist on {node.kind.value} node {node.id!r}")


def get_successor(node: Node, slot: Slot) -> Optional[str]:
    """Reads the successor id held in ``slot``."""
    _require_slot(node, slot)
    if node.kind == NodeKind.BRANCH:
        exits = node.exits or BranchExits()
        return getattr(exits, slot)  # type: ignore[arg-type]
    return node.children[0] if node.children else None


def set_successor(node: Node, slot: Slot, child_id: Optional[str]) -> Node:
    """Returns a copy of ``node`` with ``slot`` pointing at ``child_id``.

    Always re-derives ``children``. Raises InvalidSlotError for a slot that
    does not fit the node kind, or when attaching a successor to an end node.
    """
    _require_slot(node, slot)
    if node.kind == NodeKind.BRANCH:
        exits = (node.exits or BranchExits()).model_copy(update={slot: child_id})
        return derive_children(node.model_copy(update={"exits": exits}))

    if node.kind == NodeKind.END and child_id is not None:
        raise InvalidSlotError(f"End node {node.id!r} cannot have a successor")

    children = (child_id,) if child_id else ()
    return derive_children(node.model_copy(update={"children": children}))


def create_node(
    kind: NodeKind,
    parent_id: Optional[str],
    label: Optional[str] = None,
    id_factory: Callable[[], str] = create_id,
) -> Node:
    """
    Creates a detached node with a fresh id and no successors.

    Args:
        kind: The node kind.
        parent_id: The id of the owning predecessor, None for the root.
        label: Display text. Defaults to a label derived from ``kind``.
        id_factory: Source of the new node's id.

    Returns:
        Node: The new node, with both exits absent for branch nodes.
    """
    node_kind = NodeKind(kind)
    node = Node(
        id=id_factory(),
        kind=node_kind,
        label=label if label is not None else default_label_for_kind(node_kind),
        parent_id=parent_id,
        exits=BranchExits() if node_kind == NodeKind.BRANCH else None,
    )
    return derive_children(node)


def create_initial_workflow(id_factory: Callable[[], str] = create_id) -> Workflow:
    """Seeds a workflow holding a single start node as its root."""
    start = create_node(NodeKind.START, None, "Start", id_factory=id_factory)
    return Workflow(nodes={start.id: start}, root_id=start.id)
