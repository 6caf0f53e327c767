# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

import itertools
from typing import Callable, Iterator, List

import pytest
from loguru import logger

from coreason_flowtree.core.model import Workflow, create_initial_workflow


@pytest.fixture  # type: ignore[misc]
def id_factory() -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"n{next(counter)}"


@pytest.fixture  # type: ignore[misc]
def workflow(id_factory: Callable[[], str]) -> Workflow:
    """Initial workflow; the start node has id ``n1``."""
    return create_initial_workflow(id_factory=id_factory)


@pytest.fixture  # type: ignore[misc]
def log_messages() -> Iterator[List[str]]:
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="DEBUG")
    yield messages
    logger.remove(handler_id)
