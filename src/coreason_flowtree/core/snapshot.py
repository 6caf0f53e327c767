# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

import json
from typing import Any, Dict, Optional

from pydantic import ValidationError

from coreason_flowtree.core.model import Node, NodeKind, Workflow
from coreason_flowtree.engine.topology import TopologyEngine


class SnapshotError(ValueError):
    """Raised when an exported snapshot cannot be parsed back into a workflow."""

    pass


def export_node(node: Node) -> Dict[str, Any]:
    """Serializes a node with camelCase keys; ``exits`` only appears on branch nodes."""
    exclude = None if node.kind == NodeKind.BRANCH else {"exits"}
    return node.model_dump(mode="json", by_alias=True, exclude=exclude)


def export_workflow(workflow: Workflow) -> Dict[str, Any]:
    """
    Exports the workflow as plain JSON-compatible data:
    ``{"nodes": {id: {...}}, "rootId": ...}``.
    """
    return {
        "nodes": {node_id: export_node(node) for node_id, node in workflow.nodes.items()},
        "rootId": workflow.root_id,
    }


def export_workflow_json(workflow: Workflow, indent: Optional[int] = 2) -> str:
    return json.dumps(export_workflow(workflow), indent=indent)


def import_workflow(data: Dict[str, Any], topology: Optional[TopologyEngine] = None) -> Workflow:
    """
    Parses an exported snapshot and validates its structure.

    Raises:
        SnapshotError: If the data does not have the exported shape.
        WorkflowIntegrityError: If the parsed workflow is not a well-formed tree.
    """
    try:
        workflow = Workflow.model_validate(data)
    except ValidationError as e:
        raise SnapshotError(f"Invalid workflow snapshot: {e}") from e

    (topology or TopologyEngine()).validate_workflow(workflow)
    return workflow


def import_workflow_json(text: str, topology: Optional[TopologyEngine] = None) -> Workflow:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e
    return import_workflow(data, topology=topology)
