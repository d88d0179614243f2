"""Diagnostics sinks used while rendering pages."""

import logging
from abc import ABC, abstractmethod


class Reporter(ABC):
    """Abstract base class for anything that collects rendering diagnostics."""

    @abstractmethod
    def warn(self, message: str) -> None:
        """Report a problem that does not stop rendering."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Report a problem with the input that the user must fix."""


class LoggingReporter(Reporter):
    """Forwards diagnostics to a logger."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def warn(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.logger.error(message)

