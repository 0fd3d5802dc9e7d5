"""Tests for DispatchResult and DispatchError."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from frontline.domain.types import DispatchStatus
from frontline.services.result import DispatchError, DispatchResult


class TestDispatchResult:
    def test_minimal(self) -> None:
        result = DispatchResult(ok=True, identifier="home", status=DispatchStatus.COMPLETED)
        assert result.request is None
        assert result.trail == []
        assert result.warnings == []
        assert result.error is None
        assert not result.forwarded

    def test_forwarded(self) -> None:
        result = DispatchResult(
            ok=True, identifier="a", request="b", status="completed", trail=["a", "b"]
        )
        assert result.forwarded
        assert result.status is DispatchStatus.COMPLETED

    def test_frozen(self) -> None:
        result = DispatchResult(ok=True, identifier="a", status=DispatchStatus.COMPLETED)
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_json_dump(self) -> None:
        result = DispatchResult(
            ok=False,
            identifier="x",
            status=DispatchStatus.NOT_FOUND,
            error=DispatchError(code="NOT_FOUND", message="No request matches 'x'"),
        )
        data = result.model_dump(mode="json")
        assert data["status"] == "not_found"
        assert data["error"] == {
            "code": "NOT_FOUND",
            "message": "No request matches 'x'",
            "detail": {},
        }
