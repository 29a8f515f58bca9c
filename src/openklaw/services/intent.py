"""
Keyword heuristic for spotting report requests in chat input.
"""

from openklaw.core.constants import REPORT_KEYWORDS


def is_report_request(text: str) -> bool:
    """
    Whether free-form input looks like a request to write a report.

    Decides if the chat UI should offer the template picker. A plain
    substring match, so false positives and misses are expected.
    """
    lowered = text.lower()
    return any(keyword in lowered for keyword in REPORT_KEYWORDS)
