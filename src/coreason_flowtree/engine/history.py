# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

from typing import Any, Callable, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, ConfigDict

from coreason_flowtree.core.model import Workflow, create_id, create_initial_workflow
from coreason_flowtree.core.requests import RedoRequest, UndoRequest
from coreason_flowtree.engine.mutations import apply_request


class HistoryState(BaseModel):
    """
    Linear undo/redo history around the current workflow.

    ``past`` is oldest first; ``future`` is soonest-redo first.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    past: Tuple[Workflow, ...] = ()
    present: Workflow
    future: Tuple[Workflow, ...] = ()

    @property
    def can_undo(self) -> bool:
        return len(self.past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self.future) > 0


def _make_state(past: Tuple[Workflow, ...], present: Workflow, future: Tuple[Workflow, ...]) -> HistoryState:
    # Snapshots are already validated; keep their identity intact.
    return HistoryState.model_construct(past=past, present=present, future=future)


def create_initial_history(workflow: Optional[Workflow] = None) -> HistoryState:
    return _make_state((), workflow or create_initial_workflow(), ())


def apply_edit(
    state: HistoryState,
    request: Any,
    limit: Optional[int] = None,
    id_factory: Callable[[], str] = create_id,
) -> HistoryState:
    """
    Applies an edit request and records the previous workflow for undo.

    A rejected edit leaves the history untouched and returns ``state`` itself.
    Any accepted edit clears the redo stack.

    Args:
        state: The current history.
        request: An Insert, Delete or UpdateLabel request.
        limit: Maximum number of undo steps to keep. None keeps all of them.
        id_factory: Source of ids for inserted nodes.
    """
    if limit is not None and limit < 1:
        raise ValueError("limit must be >= 1")

    next_present = apply_request(state.present, request, id_factory=id_factory)
    if next_present is state.present:
        return state

    past = state.past + (state.present,)
    if limit is not None and len(past) > limit:
        logger.debug(f"Evicting {len(past) - limit} undo step(s) beyond limit {limit}")
        past = past[-limit:]

    return _make_state(past, next_present, ())


def undo(state: HistoryState) -> HistoryState:
    if not state.past:
        return state
    return _make_state(state.past[:-1], state.past[-1], (state.present,) + state.future)


def redo(state: HistoryState) -> HistoryState:
    if not state.future:
        return state
    return _make_state(state.past + (state.present,), state.future[0], state.future[1:])


def dispatch(
    state: HistoryState,
    request: Any,
    limit: Optional[int] = None,
    id_factory: Callable[[], str] = create_id,
) -> HistoryState:
    """Routes any of the five requests to the matching history transition."""
    if isinstance(request, UndoRequest):
        return undo(state)
    if isinstance(request, RedoRequest):
        return redo(state)
    return apply_edit(state, request, limit=limit, id_factory=id_factory)
