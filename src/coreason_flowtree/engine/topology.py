# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

from typing import Dict, List

import networkx as nx

from coreason_flowtree.core.model import BranchExits, NodeKind, Workflow

_FAN_OUT: Dict[NodeKind, int] = {
    NodeKind.START: 1,
    NodeKind.ACTION: 1,
    NodeKind.BRANCH: 2,
    NodeKind.END: 0,
}


class WorkflowIntegrityError(Exception):
    """Base class for structural violations of a workflow tree."""

    pass


class DanglingReferenceError(WorkflowIntegrityError):
    """Raised when a node references an id missing from the workflow."""

    pass


class RootIntegrityError(WorkflowIntegrityError):
    """Raised when the root is not the single parentless start node."""

    pass


class FanOutError(WorkflowIntegrityError):
    """Raised when a node exceeds its kind's fan-out or its children disagree with its exits."""

    pass


class CyclicDependencyError(WorkflowIntegrityError):
    """Raised when the graph contains a cycle."""

    pass


class GraphIntegrityError(WorkflowIntegrityError):
    """Raised when the graph is not a tree rooted at the root node."""

    pass


class TopologyEngine:
    """Checks that a workflow is a well-formed tree."""

    def build_graph(self, workflow: Workflow) -> nx.DiGraph:
        """Builds a NetworkX DiGraph following each node's ``children``.

        Edges carry the slot they leave from ("true"/"false" for branches,
        None otherwise). Children that name missing nodes are skipped.

        Args:
            workflow: The workflow to convert.

        Returns:
            nx.DiGraph: One graph node per workflow node.
        """
        graph = nx.DiGraph(root=workflow.root_id)

        for node in workflow.nodes.values():
            graph.add_node(node.id, kind=node.kind.value, label=node.label)

        for node in workflow.nodes.values():
            for child_id in node.children:
                if child_id not in workflow.nodes:
                    continue
                slot = None
                if node.kind == NodeKind.BRANCH and node.exits is not None:
                    slot = "true" if node.exits.true == child_id else "false"
                graph.add_edge(node.id, child_id, slot=slot)

        return graph

    def validate_workflow(self, workflow: Workflow) -> nx.DiGraph:
        """Validates every structural invariant of ``workflow``.

        Returns:
            nx.DiGraph: The validated graph.

        Raises:
            DanglingReferenceError: If the root, a child, an exit or a parent id is missing.
            RootIntegrityError: If the root is not the only start node or has a parent.
            FanOutError: If a node has more successors than its kind allows.
            CyclicDependencyError: If the graph contains a cycle.
            GraphIntegrityError: If a node is unreachable, has two parents, or its parentId is wrong.
        """
        self._check_references(workflow)
        self._check_root(workflow)
        self._check_fan_out(workflow)

        graph = self.build_graph(workflow)
        if not nx.is_directed_acyclic_graph(graph):
            raise CyclicDependencyError("The workflow graph contains a cycle.")

        reachable = nx.descendants(graph, workflow.root_id) | {workflow.root_id}
        unreachable = sorted(set(graph.nodes) - reachable)
        if unreachable:
            raise GraphIntegrityError(f"Nodes unreachable from the root: {unreachable}")

        shared = sorted(node_id for node_id, degree in graph.in_degree() if degree > 1)
        if shared:
            raise GraphIntegrityError(f"Nodes with more than one parent: {shared}")

        for parent_id, child_id in graph.edges():
            actual = workflow.nodes[child_id].parent_id
            if actual != parent_id:
                raise GraphIntegrityError(f"Node {child_id} is linked from {parent_id} but names {actual} as parent")

        return graph

    def _check_references(self, workflow: Workflow) -> None:
        if workflow.root_id not in workflow.nodes:
            raise DanglingReferenceError(f"Root {workflow.root_id} is not in the workflow")

        for key, node in workflow.nodes.items():
            if key != node.id:
                raise GraphIntegrityError(f"Node {node.id} is stored under key {key}")
            referenced: List[str] = list(node.children)
            if node.exits is not None:
                referenced.extend(child_id for child_id in (node.exits.true, node.exits.false) if child_id)
            if node.parent_id is not None:
                referenced.append(node.parent_id)
            missing = [ref for ref in referenced if ref not in workflow.nodes]
            if missing:
                raise DanglingReferenceError(f"Node {node.id} references missing node(s): {missing}")

    def _check_root(self, workflow: Workflow) -> None:
        root = workflow.nodes[workflow.root_id]
        if root.kind != NodeKind.START:
            raise RootIntegrityError(f"Root {root.id} is a {root.kind.value} node, expected start")
        if root.parent_id is not None:
            raise RootIntegrityError(f"Root {root.id} has parent {root.parent_id}")

        starts = [node.id for node in workflow.nodes.values() if node.kind == NodeKind.START]
        if len(starts) != 1:
            raise RootIntegrityError(f"Expected exactly one start node, found {len(starts)}")

    def _check_fan_out(self, workflow: Workflow) -> None:
        for node in workflow.nodes.values():
            capacity = _FAN_OUT[node.kind]
            if len(node.children) > capacity:
                raise FanOutError(f"{node.kind.value} node {node.id} has {len(node.children)} successors, max {capacity}")

            if node.kind == NodeKind.BRANCH:
                exits = node.exits or BranchExits()
                projection = tuple(child_id for child_id in (exits.true, exits.false) if child_id)
                if node.children != projection:
                    raise FanOutError(f"Branch node {node.id} children {list(node.children)} do not match its exits")
                if exits.true is not None and exits.true == exits.false:
                    raise FanOutError(f"Branch node {node.id} routes both exits to {exits.true}")
            elif node.exits is not None:
                raise FanOutError(f"{node.kind.value} node {node.id} must not carry exits")
