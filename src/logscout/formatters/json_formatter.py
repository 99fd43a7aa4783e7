"""JSON formatter for logscout."""

import json

from ..scanning.models import ScanSummary
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render the summary as JSON. Per-file results are included with --details."""

    def render(self, summary: ScanSummary) -> None:
        print(self.format(summary))

    def format(self, summary: ScanSummary) -> str:
        data = summary.to_dict()
        if not self.details:
            data.pop("results")
        return json.dumps(data, indent=2)
