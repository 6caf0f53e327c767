# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

import contextlib
import sys
from typing import Optional

from loguru import logger

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"

_handler_id: Optional[int] = None


def configure_logging(level: str = "INFO") -> int:
    """
    Installs the package's stderr handler at ``level``.

    Only the handler added by a previous call is replaced, so handlers added by
    the host application stay in place. The first call also drops loguru's
    default stderr handler.

    Raises:
        ValueError: If ``level`` is not a known loguru level.
    """
    global _handler_id

    level = level.upper()
    logger.level(level)

    # loguru registers its default handler as 0
    previous = 0 if _handler_id is None else _handler_id
    with contextlib.suppress(ValueError):
        logger.remove(previous)
    _handler_id = logger.add(sys.stderr, format=_FORMAT, level=level)
    return _handler_id


__all__ = ["logger", "configure_logging"]
