"""Tests for result formatting."""

from __future__ import annotations

import json

from wgmail.output.formatters import format_result
from wgmail.services.result import ServiceError, ServiceResult


class TestFormatResult:
    def test_human_success(self) -> None:
        result = ServiceResult(
            ok=True, op="send_peer_email", data={"sent": ["p1"], "sent_count": 1}
        )
        output = format_result(result)
        assert output.splitlines() == ["OK: send_peer_email", '  sent: ["p1"]', "  sent_count: 1"]

    def test_human_failure(self) -> None:
        result = ServiceResult(
            ok=False,
            op="send_peer_email",
            error=ServiceError(code="PEER_LOOKUP_FAILED", message="failed to fetch peer p9"),
        )
        assert format_result(result) == "ERROR: send_peer_email: failed to fetch peer p9"

    def test_json(self) -> None:
        result = ServiceResult(ok=True, op="send_peer_email", data={"sent_count": 0})
        parsed = json.loads(format_result(result, json_output=True))
        assert parsed["op"] == "send_peer_email"
        assert parsed["data"]["sent_count"] == 0
