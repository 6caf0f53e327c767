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
Mutation engine and undo/redo history for tree-shaped workflows.
"""

from coreason_flowtree.utils.logger import configure_logging, logger

from coreason_flowtree.config import EditorSettings
from coreason_flowtree.core.model import (
    BRANCH_EXIT_KEYS,
    INSERTABLE_KINDS,
    BranchExits,
    InvalidSlotError,
    Node,
    NodeKind,
    Slot,
    Workflow,
    create_initial_workflow,
    create_node,
    default_label_for_kind,
    derive_children,
    get_available_slots,
    get_successor,
    set_successor,
)
from coreason_flowtree.core.requests import (
    DeleteRequest,
    InsertRequest,
    RedoRequest,
    UndoRequest,
    UpdateLabelRequest,
    parse_request,
)
from coreason_flowtree.core.session import EditorSession, EditOutcome
from coreason_flowtree.core.snapshot import SnapshotError, export_workflow, import_workflow
from coreason_flowtree.engine.history import HistoryState, apply_edit, create_initial_history, redo, undo
from coreason_flowtree.engine.mutations import apply_request, delete_node, insert_node, update_label
from coreason_flowtree.engine.topology import TopologyEngine, WorkflowIntegrityError
from coreason_flowtree.events.protocol import EditEvent

__all__ = [
    "BRANCH_EXIT_KEYS",
    "INSERTABLE_KINDS",
    "BranchExits",
    "DeleteRequest",
    "EditEvent",
    "EditOutcome",
    "EditorSession",
    "EditorSettings",
    "HistoryState",
    "InsertRequest",
    "InvalidSlotError",
    "Node",
    "NodeKind",
    "RedoRequest",
    "Slot",
    "SnapshotError",
    "TopologyEngine",
    "UndoRequest",
    "UpdateLabelRequest",
    "Workflow",
    "WorkflowIntegrityError",
    "apply_edit",
    "apply_request",
    "configure_logging",
    "create_initial_history",
    "create_initial_workflow",
    "create_node",
    "default_label_for_kind",
    "delete_node",
    "derive_children",
    "export_workflow",
    "get_available_slots",
    "get_successor",
    "import_workflow",
    "insert_node",
    "logger",
    "parse_request",
    "redo",
    "set_successor",
    "undo",
    "update_label",
]
