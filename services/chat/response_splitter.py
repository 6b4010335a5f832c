"""Split model replies into conversational text and the consultation report."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

REPORT_START_MARKER = "--- REPORT START ---"
REPORT_END_MARKER = "--- REPORT END ---"


@dataclass(frozen=True)
class SplitResponse:
    pre_text: Optional[str] = None
    report: Optional[str] = None
    post_text: Optional[str] = None

    @property
    def has_report(self) -> bool:
        return self.report is not None


def split_response(text: str) -> SplitResponse:
    """Extract the report block delimited by the sentinel markers.

    Only the first START and the first END marker are considered. When both
    are present and END follows START, the text before, between and after
    them is trimmed and returned separately (any of the three may be empty).
    Otherwise the whole reply is plain conversational text. A second START
    appearing before END stays inside the report body.
    """
    start = text.find(REPORT_START_MARKER)
    end = text.find(REPORT_END_MARKER)

    if start == -1 or end == -1 or end <= start:
        return SplitResponse(pre_text=text)

    return SplitResponse(
        pre_text=text[:start].strip(),
        report=text[start + len(REPORT_START_MARKER):end].strip(),
        post_text=text[end + len(REPORT_END_MARKER):].strip(),
    )
