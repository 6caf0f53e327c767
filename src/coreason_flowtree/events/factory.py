# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

import time
from typing import List, Optional

from coreason_flowtree.events.protocol import (
    EditEvent,
    EditRejected,
    HistoryMoved,
    LabelUpdated,
    NodeDeleted,
    NodeInserted,
    SnapshotSaved,
)


class EventFactory:
    """
    Factory for creating standardized EditEvents.
    Reduces boilerplate in the session.
    """

    @staticmethod
    def create_node_inserted(
        session_id: str, sequence_id: int, node_id: str, parent_id: str, kind: str, slot: Optional[str]
    ) -> EditEvent:
        payload = NodeInserted(node_id=node_id, parent_id=parent_id, kind=kind, slot=slot)
        return EditEvent(
            event_type="NODE_INSERTED",
            session_id=session_id,
            node_id=node_id,
            timestamp=time.time(),
            sequence_id=sequence_id,
            payload=payload.model_dump(),
        )

    @staticmethod
    def create_node_deleted(session_id: str, sequence_id: int, node_id: str, removed_ids: List[str]) -> EditEvent:
        payload = NodeDeleted(node_id=node_id, removed_ids=removed_ids)
        return EditEvent(
            event_type="NODE_DELETED",
            session_id=session_id,
            node_id=node_id,
            timestamp=time.time(),
            sequence_id=sequence_id,
            payload=payload.model_dump(),
        )

    @staticmethod
    def create_label_updated(session_id: str, sequence_id: int, node_id: str, label: str) -> EditEvent:
        payload = LabelUpdated(node_id=node_id, label=label)
        return EditEvent(
            event_type="LABEL_UPDATED",
            session_id=session_id,
            node_id=node_id,
            timestamp=time.time(),
            sequence_id=sequence_id,
            payload=payload.model_dump(),
        )

    @staticmethod
    def create_edit_rejected(
        session_id: str, sequence_id: int, request_type: str, reason: Optional[str], node_id: Optional[str] = None
    ) -> EditEvent:
        payload = EditRejected(request_type=request_type, reason=reason)
        return EditEvent(
            event_type="EDIT_REJECTED",
            session_id=session_id,
            node_id=node_id,
            timestamp=time.time(),
            sequence_id=sequence_id,
            payload=payload.model_dump(),
        )

    @staticmethod
    def create_history_moved(
        session_id: str, sequence_id: int, direction: str, undo_depth: int, redo_depth: int
    ) -> EditEvent:
        payload = HistoryMoved(undo_depth=undo_depth, redo_depth=redo_depth)
        return EditEvent(
            event_type="UNDO" if direction == "undo" else "REDO",
            session_id=session_id,
            timestamp=time.time(),
            sequence_id=sequence_id,
            payload=payload.model_dump(),
        )

    @staticmethod
    def create_snapshot_saved(session_id: str, sequence_id: int, root_id: str, node_count: int) -> EditEvent:
        payload = SnapshotSaved(root_id=root_id, node_count=node_count)
        return EditEvent(
            event_type="SNAPSHOT_SAVED",
            session_id=session_id,
            node_id=root_id,
            timestamp=time.time(),
            sequence_id=sequence_id,
            payload=payload.model_dump(),
        )
