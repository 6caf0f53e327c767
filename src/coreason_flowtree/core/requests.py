# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# Ids, slot, kind and label stay loosely typed here. A request naming a missing
# id, an unknown kind or a slot the parent does not have is still a well-formed
# request; the engine rejects it as a no-op.


class InsertRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    type: Literal["insert"] = "insert"
    parent_id: Optional[str] = Field(alias="parentId")
    slot: Optional[str] = None
    kind: Optional[str]
    label: Optional[str] = None


class DeleteRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    type: Literal["delete"] = "delete"
    node_id: Optional[str] = Field(alias="nodeId")


class UpdateLabelRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    type: Literal["update_label"] = "update_label"
    node_id: Optional[str] = Field(alias="nodeId")
    label: Optional[str]


class UndoRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["undo"] = "undo"


class RedoRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["redo"] = "redo"


EditRequest = Union[InsertRequest, DeleteRequest, UpdateLabelRequest]

Request = Annotated[
    Union[InsertRequest, DeleteRequest, UpdateLabelRequest, UndoRequest, RedoRequest],
    Field(discriminator="type"),
]

_request_adapter: TypeAdapter[Any] = TypeAdapter(Request)


def parse_request(raw: Dict[str, Any]) -> Any:
    """
    Parses a raw request payload into one of the request models.

    Raises:
        pydantic.ValidationError: If the payload has no known ``type`` or misses fields.
    """
    return _request_adapter.validate_python(raw)
