"""
Logging utilities for surfacing engine logs in a host application.

The engine only emits records through module loggers. A host UI that wants
to show fallback notices (e.g. "layout could not be reapplied") attaches a
QueueLogHandler and drains the queue on its own thread.
"""
from __future__ import annotations

import logging
from queue import Empty, Queue
from typing import List, Optional, Tuple

ENGINE_LOGGER_NAME = "album_layout"


class QueueLogHandler(logging.Handler):
    """
    A logging handler that sends (message, level) tuples to a queue.

    DEBUG records are reported as INFO so a host console can treat them
    uniformly.
    """

    def __init__(self, log_queue: Queue, level: int = logging.INFO):
        super().__init__(level)
        self.log_queue = log_queue
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            level = record.levelname
            if level == "DEBUG":
                level = "INFO"
            self.log_queue.put((message, level))
        except Exception:
            self.handleError(record)


def attach_queue_handler(
    log_queue: Queue,
    logger_name: Optional[str] = ENGINE_LOGGER_NAME,
    level: int = logging.INFO,
) -> QueueLogHandler:
    """
    Attach a QueueLogHandler to the specified logger.

    Args:
        log_queue: Queue to send log messages to.
        logger_name: Name of logger to attach to. Defaults to the engine
            package logger; None = root logger.
        level: Minimum level forwarded to the queue.

    Returns:
        The attached handler (for later removal).
    """
    logger = logging.getLogger(logger_name)
    handler = QueueLogHandler(log_queue, level=level)
    logger.addHandler(handler)
    if logger.getEffectiveLevel() > level:
        logger.setLevel(level)
    return handler


def detach_queue_handler(
    handler: QueueLogHandler,
    logger_name: Optional[str] = ENGINE_LOGGER_NAME,
) -> None:
    """
    Remove a QueueLogHandler from the specified logger.

    Args:
        handler: The handler to remove.
        logger_name: Name of logger to detach from. None = root logger.
    """
    logger = logging.getLogger(logger_name)
    logger.removeHandler(handler)


def drain_queue(log_queue: Queue) -> List[Tuple[str, str]]:
    """Pop every pending (message, level) tuple without blocking."""
    drained: List[Tuple[str, str]] = []
    while True:
        try:
            drained.append(log_queue.get_nowait())
        except Empty:
            return drained
