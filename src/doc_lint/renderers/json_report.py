"""
JSON report renderer, for CI annotations and other tools.
"""

import json

from doc_lint.renderers.base import BaseRenderer


class JSONRenderer(BaseRenderer):
    format_name = "json"

    def render(self) -> str:
        return json.dumps(self.report.to_dict(), indent=2, default=str)
