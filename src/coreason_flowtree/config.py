# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

_TRUTHY = {"1", "true", "yes", "on"}


class EditorSettings(BaseModel):
    """
    Settings for an editor session.

    ``history_limit`` caps the number of undo steps; None keeps them all.
    ``validate_edits`` runs the structural validator after every accepted edit.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    log_level: str = "INFO"
    history_limit: Optional[int] = Field(default=None, ge=1)
    validate_edits: bool = False

    @classmethod
    def from_env(cls) -> "EditorSettings":
        """Reads FLOWTREE_LOG_LEVEL, FLOWTREE_HISTORY_LIMIT and FLOWTREE_VALIDATE_EDITS."""
        raw_limit = os.getenv("FLOWTREE_HISTORY_LIMIT", "").strip()
        return cls(
            log_level=os.getenv("FLOWTREE_LOG_LEVEL", "INFO").strip().upper() or "INFO",
            history_limit=int(raw_limit) if raw_limit else None,
            validate_edits=os.getenv("FLOWTREE_VALIDATE_EDITS", "false").strip().lower() in _TRUTHY,
        )
