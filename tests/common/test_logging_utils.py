"""
Unit Tests for Logging Utilities

Tests the queue handler hosts use to surface engine log messages.
"""

import logging
from queue import Queue

from album_layout.common.logging_utils import (
    ENGINE_LOGGER_NAME,
    QueueLogHandler,
    attach_queue_handler,
    detach_queue_handler,
    drain_queue,
)


class TestQueueLogHandler:
    """Tests for QueueLogHandler."""

    def test_emit_when_warning_then_queued_with_level(self):
        """Test warnings are queued with their level name."""
        # Arrange
        q: Queue = Queue()
        logger = logging.getLogger("album_layout.tests.emit")
        logger.propagate = False
        handler = QueueLogHandler(q)
        logger.addHandler(handler)

        # Act
        logger.warning("Falling back to grid")
        logger.removeHandler(handler)

        # Assert
        assert drain_queue(q) == [("Falling back to grid", "WARNING")]

    def test_emit_when_debug_then_reported_as_info(self):
        """Test debug records surface as INFO."""
        q: Queue = Queue()
        logger = logging.getLogger("album_layout.tests.debug")
        logger.propagate = False
        logger.setLevel(logging.DEBUG)
        handler = QueueLogHandler(q, level=logging.DEBUG)
        logger.addHandler(handler)

        logger.debug("Grid layout [2, 2]")
        logger.removeHandler(handler)

        assert drain_queue(q) == [("Grid layout [2, 2]", "INFO")]


class TestAttachDetach:
    """Tests for attaching handlers to the engine logger."""

    def test_attach_when_child_logger_warns_then_message_arrives(self):
        """Test the package handler receives child logger records."""
        # Arrange
        q: Queue = Queue()
        handler = attach_queue_handler(q)

        # Act
        logging.getLogger(f"{ENGINE_LOGGER_NAME}.engine.arranger").warning("Ignoring forced layout")
        detach_queue_handler(handler)
        logging.getLogger(f"{ENGINE_LOGGER_NAME}.engine.arranger").warning("after detach")

        # Assert
        assert drain_queue(q) == [("Ignoring forced layout", "WARNING")]

    def test_drain_when_empty_then_empty_list(self):
        """Test draining an empty queue."""
        assert drain_queue(Queue()) == []
