# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_flowtree

from typing import List, Protocol

from loguru import logger

from coreason_flowtree.events.protocol import EditEvent


class EditEventSink(Protocol):
    """
    Interface for event sinks.
    """

    def emit(self, event: EditEvent) -> None:
        """
        Emits an event to the sink.
        """
        ...


class LoggingEventSink:
    """
    Event sink that logs events to the logger.
    Default for local editing sessions.
    """

    def emit(self, event: EditEvent) -> None:
        logger.info(f"Event: {event.event_type} - {event.node_id} - {event.payload}")


class CollectingEventSink:
    """
    Event sink that keeps every event in memory, oldest first.
    """

    def __init__(self) -> None:
        self.events: List[EditEvent] = []

    def emit(self, event: EditEvent) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()


class NullEventSink:
    def emit(self, event: EditEvent) -> None:
        return None
