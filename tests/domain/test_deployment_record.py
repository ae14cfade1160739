"""
Domain Layer Tests

Architectural Intent:
- Unit tests for the deployment record model and history collection
- No mocks needed - pure domain logic testing
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, UTC

import pytest

from tidemark.domain.entities.deployment import (
    Binding,
    DeploymentResources,
    DeploymentHistory,
    DeploymentRecord,
    format_timestamp,
    parse_timestamp,
)
from tidemark.domain.exceptions import MalformedRecordError


def _record(deployment_id="Galaxy-Class", number=1, created="2021-01-01T00:00:00Z", **kwargs):
    return DeploymentRecord(
        id=deployment_id,
        number=number,
        created_at=parse_timestamp(created),
        author=kwargs.pop("author", "picard@federation.org"),
        source=kwargs.pop("source", "wrangler"),
        **kwargs,
    )


class TestParseTimestamp:
    def test_zulu_with_microseconds(self):
        parsed = parse_timestamp("2021-01-01T00:00:00.000000Z")
        assert parsed == datetime(2021, 1, 1, tzinfo=UTC)

    def test_short_fraction_is_padded(self):
        parsed = parse_timestamp("2222-11-18T16:40:48.50545Z")
        assert parsed.microsecond == 505450

    def test_long_fraction_is_truncated(self):
        parsed = parse_timestamp("2021-01-01T00:00:00.123456789Z")
        assert parsed.microsecond == 123456

    def test_naive_is_assumed_utc(self):
        assert parse_timestamp("2021-01-01T00:00:00").tzinfo is not None

    def test_invalid_raises_malformed(self):
        with pytest.raises(MalformedRecordError, match="created_at"):
            parse_timestamp("yesterday")

    def test_missing_raises_malformed(self):
        with pytest.raises(MalformedRecordError):
            parse_timestamp(None)

    def test_format_round_trips_display_form(self):
        assert format_timestamp(parse_timestamp("2021-02-02T00:00:00.000000Z")) == (
            "2021-02-02T00:00:00.000000Z"
        )


class TestDeploymentRecord:
    def test_create_record(self):
        record = _record()
        assert record.id == "Galaxy-Class"
        assert record.number == 1
        assert record.resources is None
        assert record.rollback_metadata is None
        assert not record.is_rollback
        assert not record.has_full_resources

    def test_record_is_immutable(self):
        record = _record()
        with pytest.raises(FrozenInstanceError):
            record.id = "Intrepid-Class"

    @pytest.mark.parametrize("field_name", ["id", "author", "source"])
    def test_empty_required_string_rejected(self, field_name):
        kwargs = {
            "id": "Galaxy-Class",
            "created_at": datetime(2021, 1, 1, tzinfo=UTC),
            "author": "picard@federation.org",
            "source": "wrangler",
        }
        kwargs[field_name] = ""
        with pytest.raises(MalformedRecordError, match=f"'{field_name}'"):
            DeploymentRecord(**kwargs)

    def test_created_at_must_be_datetime(self):
        with pytest.raises(MalformedRecordError, match="created_at"):
            DeploymentRecord(
                id="x", created_at="2021-01-01", author="a@b.c", source="api"
            )

    @pytest.mark.parametrize("number", [-1, "3", 1.5, True])
    def test_number_must_be_non_negative_int(self, number):
        with pytest.raises(MalformedRecordError, match="number"):
            _record(number=number)

    def test_number_is_optional(self):
        assert _record(number=None).number is None

    def test_error_names_deployment(self):
        with pytest.raises(MalformedRecordError) as exc_info:
            _record(author="")
        assert exc_info.value.deployment_id == "Galaxy-Class"
        assert exc_info.value.field_name == "author"


class TestBinding:
    def test_duplicate_names_allowed(self):
        a = Binding(type="kv_namespace", name="CACHE")
        b = Binding(type="kv_namespace", name="CACHE")
        assert a == b

    def test_extra_is_read_only(self):
        binding = Binding(type="plain_text", name="GREETING", extra={"text": "hi"})
        with pytest.raises(TypeError):
            binding.extra["text"] = "bye"

    def test_missing_type_rejected(self):
        with pytest.raises(MalformedRecordError, match="bindings.type"):
            Binding(type="", name="X")


class TestDeploymentHistory:
    def test_empty_history(self):
        history = DeploymentHistory()
        assert history.is_empty
        assert history.latest is None
        assert len(history) == 0

    def test_sorted_by_number(self):
        history = DeploymentHistory(
            [_record("b", 2, "2021-02-02T00:00:00Z"), _record("a", 1, "2021-01-01T00:00:00Z")]
        )
        assert history.ids == ("a", "b")
        assert history.latest.id == "b"

    def test_same_number_ordered_by_created_at(self):
        history = DeploymentHistory(
            [_record("late", 1, "2021-03-01T00:00:00Z"), _record("early", 1, "2021-01-01T00:00:00Z")]
        )
        assert history.ids == ("early", "late")

    def test_reused_id_rejected(self):
        with pytest.raises(ValueError, match="reused"):
            DeploymentHistory([_record("a", 1), _record("a", 2)])

    def test_appended_returns_new_history(self):
        original = DeploymentHistory([_record("a", 1)])
        extended = original.appended(_record("b", 2, "2021-02-02T00:00:00Z"))

        assert original.ids == ("a",)
        assert extended.ids == ("a", "b")

    def test_appended_rejects_existing_id(self):
        history = DeploymentHistory([_record("a", 1)])
        with pytest.raises(ValueError):
            history.appended(_record("a", 5))

    def test_contains_and_get(self):
        history = DeploymentHistory([_record("a", 1)])
        assert "a" in history
        assert "z" not in history
        assert history.get("a").number == 1
        assert history.get("z") is None

    def test_tail(self):
        history = DeploymentHistory(
            [_record(str(i), i, f"2021-01-{i + 1:02d}T00:00:00Z") for i in range(12)]
        )
        assert [r.id for r in history.tail(3)] == ["9", "10", "11"]
        assert history.tail(0) == ()
        assert len(history.tail(50)) == 12

    def test_records_cannot_be_mutated(self):
        history = DeploymentHistory([_record("a", 1)])
        with pytest.raises(AttributeError):
            history.records.append(_record("b", 2))


class TestHashing:
    def test_record_with_bindings_is_hashable(self):
        resources = DeploymentResources(
            bindings=(Binding(type="kv_namespace", name="CACHE", extra={"ids": ["ns1"]}),)
        )
        record = _record(resources=resources)

        assert hash(record) == hash(_record(resources=resources))
        assert len({record, _record(resources=resources)}) == 1

    def test_bindings_with_different_extra_are_not_equal(self):
        a = Binding(type="kv_namespace", name="CACHE", extra={"namespace_id": "ns1"})
        b = Binding(type="kv_namespace", name="CACHE", extra={"namespace_id": "ns2"})
        assert a != b
        assert hash(a) == hash(b)
