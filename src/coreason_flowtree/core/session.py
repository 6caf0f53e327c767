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
from typing import Any, Callable, Dict, Optional, Type

import networkx as nx
from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

from coreason_flowtree.config import EditorSettings
from coreason_flowtree.core.model import Workflow, create_id
from coreason_flowtree.core.requests import (
    DeleteRequest,
    EditRequest,
    InsertRequest,
    RedoRequest,
    UndoRequest,
    UpdateLabelRequest,
)
from coreason_flowtree.core.snapshot import export_workflow, export_workflow_json
from coreason_flowtree.engine import history
from coreason_flowtree.engine.history import HistoryState
from coreason_flowtree.engine.mutations import check_request
from coreason_flowtree.engine.topology import TopologyEngine
from coreason_flowtree.events.factory import EventFactory
from coreason_flowtree.events.protocol import EditEvent
from coreason_flowtree.events.sink import EditEventSink, LoggingEventSink
from coreason_flowtree.utils.logger import configure_logging


class EditOutcome(BaseModel):
    """
    Result of one request: whether it changed the workflow, and why not if it did not.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    applied: bool
    reason: Optional[str] = None


class EditorSession:
    """
    Owns the undo/redo history of one workflow and serves the edit requests.

    Each request reads the current history, computes the next one and
    installs it in a single assignment.
    """

    def __init__(
        self,
        settings: EditorSettings | None = None,
        sink: EditEventSink | None = None,
        workflow: Workflow | None = None,
        session_id: str | None = None,
        id_factory: Callable[[], str] = create_id,
    ) -> None:
        self.settings = settings or EditorSettings.from_env()
        configure_logging(self.settings.log_level)
        self.sink: EditEventSink = sink or LoggingEventSink()
        self.session_id = session_id or str(uuid.uuid4())
        self.topology = TopologyEngine()
        self._id_factory = id_factory
        self._sequence = 0

        if workflow is not None:
            self.topology.validate_workflow(workflow)
        self._state = history.create_initial_history(workflow)

    @property
    def state(self) -> HistoryState:
        return self._state

    @property
    def present(self) -> Workflow:
        return self._state.present

    @property
    def can_undo(self) -> bool:
        return self._state.can_undo

    @property
    def can_redo(self) -> bool:
        return self._state.can_redo

    def insert(
        self, parent_id: Optional[str], slot: Optional[str], kind: Optional[str], label: Optional[str] = None
    ) -> EditOutcome:
        return self._build_and_dispatch(InsertRequest, parent_id=parent_id, slot=slot, kind=kind, label=label)

    def delete(self, node_id: Optional[str]) -> EditOutcome:
        return self._build_and_dispatch(DeleteRequest, node_id=node_id)

    def update_label(self, node_id: Optional[str], label: Optional[str]) -> EditOutcome:
        return self._build_and_dispatch(UpdateLabelRequest, node_id=node_id, label=label)

    def undo(self) -> EditOutcome:
        return self.dispatch(UndoRequest())

    def redo(self) -> EditOutcome:
        return self.dispatch(RedoRequest())

    def dispatch(self, request: Any) -> EditOutcome:
        """
        Handles one request and emits one event describing the result.

        Args:
            request: Any of the five request models.

        Returns:
            EditOutcome: ``applied`` is False when the request was a no-op.
        """
        previous = self._state
        is_history_move = isinstance(request, (UndoRequest, RedoRequest))

        reason = None if is_history_move else check_request(previous.present, request)
        next_state = history.dispatch(
            previous,
            request,
            limit=self.settings.history_limit,
            id_factory=self._id_factory,
        )

        if next_state is previous:
            if is_history_move:
                reason = "nothing to undo" if isinstance(request, UndoRequest) else "nothing to redo"
            return self._reject(
                getattr(request, "type", type(request).__name__),
                reason or "request had no effect",
                getattr(request, "node_id", None) or getattr(request, "parent_id", None),
            )

        if self.settings.validate_edits and not is_history_move:
            self.topology.validate_workflow(next_state.present)

        self._state = next_state
        self._emit(self._describe(request, previous.present, next_state))
        return EditOutcome(applied=True)

    def validate(self) -> nx.DiGraph:
        """Runs the structural validator on the present workflow."""
        return self.topology.validate_workflow(self.present)

    def save(self) -> Dict[str, Any]:
        """
        Exports the present workflow and logs it as JSON.
        Storing or sending the snapshot is left to the caller.
        """
        workflow = self.present
        logger.info(f"Workflow JSON: {export_workflow_json(workflow)}")
        self._emit(
            EventFactory.create_snapshot_saved(
                self.session_id, self._next_sequence(), workflow.root_id, len(workflow.nodes)
            )
        )
        return export_workflow(workflow)

    def _build_and_dispatch(self, model: Type[EditRequest], **fields: Any) -> EditOutcome:
        try:
            request = model(**fields)
        except ValidationError as e:
            invalid = ", ".join(str(error["loc"][0]) for error in e.errors() if error["loc"])
            node_id = fields.get("node_id", fields.get("parent_id"))
            return self._reject(
                model.model_fields["type"].default,
                f"malformed request: invalid {invalid}",
                node_id if isinstance(node_id, str) else None,
            )
        return self.dispatch(request)

    def _reject(self, request_type: str, reason: str, node_id: Optional[str]) -> EditOutcome:
        self._emit(
            EventFactory.create_edit_rejected(
                self.session_id,
                self._next_sequence(),
                request_type=request_type,
                reason=reason,
                node_id=node_id,
            )
        )
        return EditOutcome(applied=False, reason=reason)

    def _describe(self, request: Any, before: Workflow, state: HistoryState) -> EditEvent:
        sequence_id = self._next_sequence()
        after = state.present

        if isinstance(request, (UndoRequest, RedoRequest)):
            return EventFactory.create_history_moved(
                self.session_id, sequence_id, request.type, len(state.past), len(state.future)
            )

        if isinstance(request, InsertRequest):
            inserted_id = next(node_id for node_id in after.nodes if node_id not in before.nodes)
            return EventFactory.create_node_inserted(
                self.session_id,
                sequence_id,
                inserted_id,
                request.parent_id,
                after.nodes[inserted_id].kind.value,
                request.slot,
            )

        if isinstance(request, DeleteRequest):
            removed = [node_id for node_id in before.nodes if node_id not in after.nodes]
            return EventFactory.create_node_deleted(self.session_id, sequence_id, request.node_id, removed)

        return EventFactory.create_label_updated(
            self.session_id, sequence_id, request.node_id, after.nodes[request.node_id].label
        )

    def _next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def _emit(self, event: EditEvent) -> None:
        self.sink.emit(event)
