# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

"""
Structural edits on a workflow tree.

Every function here takes a Workflow and returns a Workflow. A rejected
request returns the input object itself, so callers detect a no-op with ``is``.
Nothing is ever mutated in place: accepted edits copy the node map and
replace only the changed entries.
"""

from typing import Any, Callable, Dict, List, Optional, Set

from loguru import logger

from coreason_flowtree.core.model import (
    INSERTABLE_KINDS,
    Node,
    NodeKind,
    Slot,
    Workflow,
    coerce_kind,
    create_id,
    create_node,
    get_available_slots,
    get_successor,
    set_successor,
    slot_fits,
)
from coreason_flowtree.core.requests import DeleteRequest, InsertRequest, UpdateLabelRequest


def collect_subtree_ids(workflow: Workflow, root_id: str) -> List[str]:
    """Returns the ids of ``root_id`` and every node reachable from it via ``children``."""
    visited: List[str] = []
    seen: Set[str] = set()
    stack = [root_id]

    while stack:
        node_id = stack.pop()
        if not node_id or node_id in seen:
            continue
        seen.add(node_id)
        visited.append(node_id)

        node = workflow.get(node_id)
        if node is None:
            continue
        stack.extend(child_id for child_id in node.children if child_id)

    return visited


def slots_pointing_at(parent: Node, child_id: str) -> List[Slot]:
    """Returns the slots of ``parent`` currently holding ``child_id``, in slot order."""
    return [slot for slot in get_available_slots(parent) if get_successor(parent, slot) == child_id]


def _normalize_label(label: Any) -> str:
    return str(label if label is not None else "").strip()


def check_insert(
    workflow: Workflow,
    parent_id: Optional[str],
    slot: Any,
    kind: Any,
    label: Optional[str] = None,
) -> Optional[str]:
    """Returns why an Insert would be rejected, or None if it would be applied."""
    if not parent_id:
        return "missing parent id"
    parent = workflow.get(parent_id)
    if parent is None:
        return f"unknown parent node {parent_id!r}"
    if parent.kind == NodeKind.END:
        return "end nodes have no outgoing slot"
    if not slot_fits(parent, slot):
        return f"slot {slot!r} does not exist on a {parent.kind.value} node"
    if coerce_kind(kind) not in INSERTABLE_KINDS:
        return f"cannot insert a node of kind {kind!r}"
    if label is not None and not _normalize_label(label):
        return "label must not be empty"
    return None


def check_delete(workflow: Workflow, node_id: Optional[str]) -> Optional[str]:
    """Returns why a Delete would be rejected, or None if it would be applied."""
    node = workflow.get(node_id)
    if node is None:
        return f"unknown node {node_id!r}"
    if node.id == workflow.root_id or node.kind == NodeKind.START:
        return "the start node cannot be deleted"
    if not node.parent_id:
        return "node has no parent"
    parent = workflow.get(node.parent_id)
    if parent is None:
        return f"parent node {node.parent_id!r} does not exist"
    if not slots_pointing_at(parent, node.id):
        logger.warning(f"Node {node.id} names {parent.id} as parent but is not linked from it")
        return f"parent node {parent.id!r} does not link to {node.id!r}"
    return None


def check_update_label(workflow: Workflow, node_id: Optional[str], label: Any) -> Optional[str]:
    """Returns why an UpdateLabel would be rejected, or None if it would be applied."""
    if workflow.get(node_id) is None:
        return f"unknown node {node_id!r}"
    if not _normalize_label(label):
        return "label must not be empty"
    return None


def insert_node(
    workflow: Workflow,
    parent_id: Optional[str],
    slot: Any = None,
    kind: Any = NodeKind.ACTION,
    label: Optional[str] = None,
    id_factory: Callable[[], str] = create_id,
) -> Workflow:
    """
    Splices a new node into ``slot`` of ``parent_id``.

    The node previously held by the slot moves under the new node: onto its
    single slot, or onto the ``true`` exit of a new branch. An end node has no
    slot to take it, so the displaced subtree is removed from the workflow.

    Args:
        workflow: The current workflow.
        parent_id: The node receiving the new successor.
        slot: None for single-successor parents, "true" or "false" for branches.
        kind: One of action, branch or end.
        label: Optional display text, stored trimmed.
        id_factory: Source of the new node's id.

    Returns:
        Workflow: The edited workflow, or ``workflow`` itself if rejected.
    """
    reason = check_insert(workflow, parent_id, slot, kind, label)
    if reason:
        logger.debug(f"Insert rejected: {reason}")
        return workflow

    parent = workflow.nodes[parent_id]  # type: ignore[index]
    node_kind = NodeKind(kind)
    existing_child_id = get_successor(parent, slot)

    inserted = create_node(
        node_kind,
        parent.id,
        _normalize_label(label) if label is not None else None,
        id_factory=id_factory,
    )
    if inserted.id in workflow.nodes:
        logger.warning(f"Insert rejected: generated id {inserted.id} is already in use")
        return workflow

    pruned: List[str] = []
    if existing_child_id:
        if node_kind == NodeKind.BRANCH:
            inserted = set_successor(inserted, "true", existing_child_id)
        elif node_kind == NodeKind.END:
            pruned = collect_subtree_ids(workflow, existing_child_id)
        else:
            inserted = set_successor(inserted, None, existing_child_id)

    nodes: Dict[str, Node] = dict(workflow.nodes)
    nodes[parent.id] = set_successor(parent, slot, inserted.id)
    nodes[inserted.id] = inserted

    if existing_child_id and not pruned:
        existing_child = nodes.get(existing_child_id)
        if existing_child is not None:
            nodes[existing_child_id] = existing_child.model_copy(update={"parent_id": inserted.id})

    for node_id in pruned:
        nodes.pop(node_id, None)

    logger.debug(
        f"Inserted {node_kind.value} node {inserted.id} under {parent.id} (slot={slot})"
        + (f", pruned {len(pruned)} downstream node(s)" if pruned else "")
    )
    return workflow.model_copy(update={"nodes": nodes})


def delete_node(workflow: Workflow, node_id: Optional[str]) -> Workflow:
    """
    Removes ``node_id`` and reconnects its parent to one of its successors.

    Branch nodes promote their ``true`` exit, falling back to ``false``. Any
    other exit of a deleted branch is removed together with its whole subtree,
    so no node is left unreachable from the root.

    Returns:
        Workflow: The edited workflow, or ``workflow`` itself if rejected.
    """
    reason = check_delete(workflow, node_id)
    if reason:
        logger.debug(f"Delete rejected: {reason}")
        return workflow

    node = workflow.nodes[node_id]  # type: ignore[index]
    parent = workflow.nodes[node.parent_id]  # type: ignore[index]
    parent_slot = slots_pointing_at(parent, node.id)[0]

    if node.kind == NodeKind.BRANCH:
        reconnect_id = get_successor(node, "true") or get_successor(node, "false")
    else:
        reconnect_id = node.children[0] if node.children else None

    nodes: Dict[str, Node] = dict(workflow.nodes)
    nodes[parent.id] = set_successor(parent, parent_slot, reconnect_id)

    if reconnect_id:
        reconnected = nodes.get(reconnect_id)
        if reconnected is not None:
            nodes[reconnect_id] = reconnected.model_copy(update={"parent_id": parent.id})

    removed = [node.id]
    for child_id in node.children:
        if child_id != reconnect_id:
            removed.extend(collect_subtree_ids(workflow, child_id))

    for removed_id in removed:
        nodes.pop(removed_id, None)

    logger.debug(f"Deleted node {node.id} ({len(removed)} node(s) removed), reconnected {parent.id} -> {reconnect_id}")
    return workflow.model_copy(update={"nodes": nodes})


def update_label(workflow: Workflow, node_id: Optional[str], label: Any) -> Workflow:
    """Replaces a node's label with the trimmed ``label``; rejects blank labels."""
    reason = check_update_label(workflow, node_id, label)
    if reason:
        logger.debug(f"Label update rejected: {reason}")
        return workflow

    node = workflow.nodes[node_id]  # type: ignore[index]
    nodes = dict(workflow.nodes)
    nodes[node.id] = node.model_copy(update={"label": _normalize_label(label)})
    return workflow.model_copy(update={"nodes": nodes})


def check_request(workflow: Workflow, request: Any) -> Optional[str]:
    """Returns the rejection reason for an edit request, or None if the engine would apply it."""
    if isinstance(request, InsertRequest):
        return check_insert(workflow, request.parent_id, request.slot, request.kind, request.label)
    if isinstance(request, DeleteRequest):
        return check_delete(workflow, request.node_id)
    if isinstance(request, UpdateLabelRequest):
        return check_update_label(workflow, request.node_id, request.label)
    return f"unsupported request {type(request).__name__}"


def apply_request(workflow: Workflow, request: Any, id_factory: Callable[[], str] = create_id) -> Workflow:
    """Dispatches an edit request to the matching engine function."""
    if isinstance(request, InsertRequest):
        return insert_node(workflow, request.parent_id, request.slot, request.kind, request.label, id_factory=id_factory)
    if isinstance(request, DeleteRequest):
        return delete_node(workflow, request.node_id)
    if isinstance(request, UpdateLabelRequest):
        return update_label(workflow, request.node_id, request.label)
    return workflow
