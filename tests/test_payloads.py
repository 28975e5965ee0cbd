"""Tests for payload types and JSON serialization."""

from __future__ import annotations

import json
import uuid
from datetime import datetime

import pytest

from component_logger.core import (
    DataPayload,
    ErrorInfo,
    PerformanceInfo,
    as_payload,
    serialize_payload,
)
from component_logger.core.payloads import utc_timestamp


class TestUtcTimestamp:
    def test_is_iso_utc_with_milliseconds(self) -> None:
        value = utc_timestamp()

        parsed = datetime.fromisoformat(value)
        assert parsed.utcoffset().total_seconds() == 0
        assert len(value.split(".")[1].split("+")[0]) == 3


class TestErrorInfo:
    """Tests for ErrorInfo."""

    def test_from_raised_exception(self) -> None:
        try:
            raise KeyError("missing")
        except KeyError as e:
            info = ErrorInfo.from_exception(e, "lookup")

        assert info.message == "'missing'"
        assert info.context == "lookup"
        assert info.stack.startswith("Traceback")
        assert "KeyError: 'missing'" in info.stack

    def test_to_dict_keys(self) -> None:
        info = ErrorInfo(message="m", stack="s", context="c", timestamp="t")

        assert info.to_dict() == {
            "message": "m",
            "stack": "s",
            "context": "c",
            "timestamp": "t",
        }


class TestPerformanceInfo:
    """Tests for PerformanceInfo."""

    def test_to_dict_merges_extra(self) -> None:
        info = PerformanceInfo("Data Load", 12.5, "t", {"recordCount": 3})

        assert info.to_dict() == {
            "operation": "Data Load",
            "duration": 12.5,
            "timestamp": "t",
            "recordCount": 3,
        }

    def test_extra_overrides_base_keys(self) -> None:
        info = PerformanceInfo("Data Load", 1, "t", {"operation": "renamed"})

        assert info.to_dict()["operation"] == "renamed"


class TestAsPayload:
    """Tests for as_payload()."""

    def test_none(self) -> None:
        assert as_payload(None) is None

    def test_mapping_wrapped(self) -> None:
        payload = as_payload({"a": 1})

        assert isinstance(payload, DataPayload)
        assert payload.to_dict() == {"a": 1}

    def test_payload_passes_through(self) -> None:
        info = ErrorInfo(message="m", stack="s")

        assert as_payload(info) is info

    @pytest.mark.parametrize("value", [[1, 2], "text", 42])
    def test_rejects_other_types(self, value) -> None:
        with pytest.raises(TypeError, match="mapping or payload"):
            as_payload(value)


class TestSerializePayload:
    """Tests for serialize_payload()."""

    def test_none(self) -> None:
        assert serialize_payload(None) is None

    def test_data_payload(self) -> None:
        text = serialize_payload(DataPayload({"b": [1, 2], "a": None}))

        assert json.loads(text) == {"b": [1, 2], "a": None}

    def test_non_json_values_use_str(self) -> None:
        token = uuid.UUID(int=1)

        text = serialize_payload(DataPayload({"id": token}))

        assert json.loads(text) == {"id": str(token)}

    def test_circular_reference_raises(self) -> None:
        data: dict = {}
        data["loop"] = data

        with pytest.raises(ValueError):
            serialize_payload(DataPayload(data))

    def test_bad_key_raises(self) -> None:
        with pytest.raises(TypeError):
            serialize_payload(DataPayload({(1, 2): "tuple key"}))
