"""Quiet formatter: paths of files containing errors."""

from ..scanning.models import ScanSummary
from .base import BaseFormatter


class QuietFormatter(BaseFormatter):
    """Render just file paths, one per line."""

    def render(self, summary: ScanSummary) -> None:
        text = self.format(summary)
        if text:
            print(text)

    def format(self, summary: ScanSummary) -> str:
        return "\n".join(str(r.path) for r in summary.files_with_errors)
