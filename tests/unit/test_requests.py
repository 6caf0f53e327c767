# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

from typing import Callable

import pytest
from pydantic import ValidationError

from coreason_flowtree.core.model import Workflow
from coreason_flowtree.core.requests import (
    DeleteRequest,
    InsertRequest,
    RedoRequest,
    UndoRequest,
    UpdateLabelRequest,
    parse_request,
)
from coreason_flowtree.engine.mutations import apply_request, check_request


def test_parse_each_request_type() -> None:
    insert = parse_request({"type": "insert", "parentId": "p", "slot": "true", "kind": "end"})
    assert isinstance(insert, InsertRequest)
    assert (insert.parent_id, insert.slot, insert.kind, insert.label) == ("p", "true", "end", None)

    delete = parse_request({"type": "delete", "nodeId": "x"})
    assert isinstance(delete, DeleteRequest)
    assert delete.node_id == "x"

    relabel = parse_request({"type": "update_label", "nodeId": "x", "label": "Hi"})
    assert isinstance(relabel, UpdateLabelRequest)
    assert (relabel.node_id, relabel.label) == ("x", "Hi")

    assert isinstance(parse_request({"type": "undo"}), UndoRequest)
    assert isinstance(parse_request({"type": "redo"}), RedoRequest)



def test_parse_accepts_snake_case_names() -> None:
    request = parse_request({"type": "insert", "parent_id": "p", "kind": "action"})
    assert request.parent_id == "p"
    assert request.slot is None


def test_parse_rejects_unknown_type() -> None:
    with pytest.raises(ValidationError):
        parse_request({"type": "move", "nodeId": "x"})


def test_parse_rejects_missing_fields() -> None:
    with pytest.raises(ValidationError):
        parse_request({"type": "delete"})


def test_null_ids_parse_but_are_rejected_by_engine(workflow: Workflow) -> None:
    request = parse_request({"type": "delete", "nodeId": None})
    assert request.node_id is None
    assert check_request(workflow, request) == "unknown node None"
    assert apply_request(workflow, request) is workflow

    request = parse_request({"type": "update_label", "nodeId": "n1", "label": None})
    assert check_request(workflow, request) == "label must not be empty"
    assert apply_request(workflow, request) is workflow


def test_unknown_kind_parses_but_is_rejected_by_engine(workflow: Workflow) -> None:
    request = parse_request({"type": "insert", "parentId": "n1", "kind": "loop"})
    assert check_request(workflow, request) == "cannot insert a node of kind 'loop'"
    assert apply_request(workflow, request) is workflow


def test_apply_request_dispatch(workflow: Workflow, id_factory: Callable[[], str]) -> None:
    inserted = apply_request(workflow, InsertRequest(parent_id="n1", kind="action"), id_factory=id_factory)
    assert "n2" in inserted.nodes

    relabeled = apply_request(inserted, UpdateLabelRequest(node_id="n2", label="Notify"))
    assert relabeled.nodes["n2"].label == "Notify"

    deleted = apply_request(relabeled, DeleteRequest(node_id="n2"))
    assert set(deleted.nodes) == {"n1"}


def test_history_requests_are_not_engine_edits(workflow: Workflow) -> None:
    assert apply_request(workflow, UndoRequest()) is workflow
    assert check_request(workflow, RedoRequest()) == "unsupported request RedoRequest"
