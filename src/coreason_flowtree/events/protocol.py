# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

EditEventType = Literal[
    "NODE_INSERTED",
    "NODE_DELETED",
    "LABEL_UPDATED",
    "EDIT_REJECTED",
    "UNDO",
    "REDO",
    "SNAPSHOT_SAVED",
]


class EditEvent(BaseModel):
    """
    One handled request of an editor session, as seen by observers
    (UI layer, audit log, debugging).
    """

    model_config = ConfigDict(extra="forbid")

    event_type: EditEventType
    session_id: str
    node_id: Optional[str] = None
    timestamp: float
    sequence_id: int
    payload: Dict[str, Any] = Field(default_factory=dict)


class NodeInserted(BaseModel):
    model_config = ConfigDict(extra="forbid")
    node_id: str
    parent_id: str
    kind: str
    slot: Optional[str] = None


class NodeDeleted(BaseModel):
    model_config = ConfigDict(extra="forbid")
    node_id: str
    removed_ids: List[str]


class LabelUpdated(BaseModel):
    model_config = ConfigDict(extra="forbid")
    node_id: str
    label: str


class EditRejected(BaseModel):
    model_config = ConfigDict(extra="forbid")
    request_type: str
    reason: Optional[str] = None


class HistoryMoved(BaseModel):
    model_config = ConfigDict(extra="forbid")
    undo_depth: int
    redo_depth: int


class SnapshotSaved(BaseModel):
    model_config = ConfigDict(extra="forbid")
    root_id: str
    node_count: int
