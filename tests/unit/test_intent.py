"""
Tests for report request detection.
"""

import pytest

from openklaw.services.intent import is_report_request


@pytest.mark.parametrize(
    "text",
    [
        "주간보고 써줘",
        "회의록 정리 부탁해",
        "이번 분기 제안서가 필요해",
        "인수인계 문서 만들어줘",
        "프로젝트 현황 알려줘",
        "메일 하나 작성해 줄래?",
        "REPORT please",
        "Weekly Report draft",
    ],
)
def test_report_requests(text: str) -> None:
    assert is_report_request(text) is True


@pytest.mark.parametrize(
    "text",
    [
        "오늘 날씨 어때",
        "점심 뭐 먹지",
        "",
        "reprt typo",
    ],
)
def test_other_input(text: str) -> None:
    assert is_report_request(text) is False
