"""Base formatter interface for logscout output rendering."""

from abc import ABC, abstractmethod

from ..scanning.models import ScanSummary


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    def __init__(self, details: bool = False):
        self.details = details

    @abstractmethod
    def render(self, summary: ScanSummary) -> None:
        """Render the summary to stdout."""

    @abstractmethod
    def format(self, summary: ScanSummary) -> str:
        """Return formatted string representation of the summary."""
