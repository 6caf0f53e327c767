# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

from typing import Dict, Optional

from coreason_flowtree.core.model import BranchExits, Node, NodeKind, Workflow


def make_node(
    node_id: str,
    kind: str,
    parent_id: Optional[str] = None,
    children: tuple = (),
    true: Optional[str] = None,
    false: Optional[str] = None,
    label: Optional[str] = None,
) -> Node:
    """Builds a node directly, bypassing the engine. Branch children are given explicitly."""
    node_kind = NodeKind(kind)
    exits = BranchExits(true=true, false=false) if node_kind == NodeKind.BRANCH else None
    return Node(
        id=node_id,
        kind=node_kind,
        label=label or node_kind.value.title(),
        parent_id=parent_id,
        children=children,
        exits=exits,
    )


def make_workflow(*nodes: Node, root_id: str = "S") -> Workflow:
    mapping: Dict[str, Node] = {node.id: node for node in nodes}
    return Workflow(nodes=mapping, root_id=root_id)


def successor_chain(workflow: Workflow) -> list:
    """Kinds along the single-successor chain starting at the root."""
    kinds = []
    node: Optional[Node] = workflow.root
    while node is not None:
        kinds.append(node.kind.value)
        node = workflow.get(node.children[0]) if node.children else None
    return kinds
