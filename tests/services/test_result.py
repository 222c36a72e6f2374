"""Tests for ServiceResult and ServiceError."""

import json

import pytest

from wgmail.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="send_peer_email", data={"sent": ["p1"]})
        assert result.ok is True
        assert result.op == "send_peer_email"
        assert result.data == {"sent": ["p1"]}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_error_construction(self) -> None:
        error = ServiceError(code="PEER_LOOKUP_FAILED", message="failed to fetch peer p1")
        result = ServiceResult(ok=False, op="send_peer_email", error=error)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "PEER_LOOKUP_FAILED"

    def test_json_serialization(self) -> None:
        result = ServiceResult(
            ok=True,
            op="send_peer_email",
            data={"sent_count": 2},
            warnings=["Skipped peer p3: no user linked"],
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["sent_count"] == 2
        assert parsed["warnings"] == ["Skipped peer p3: no user linked"]

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(Exception):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_with_detail(self) -> None:
        error = ServiceError(code="SEND_FAILED", message="x", detail={"peer": "p1"})
        assert error.detail["peer"] == "p1"

    def test_default_detail(self) -> None:
        assert ServiceError(code="E", message="bad").detail == {}
