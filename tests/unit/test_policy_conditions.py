"""Unit tests for condition predicates (FieldEquals, PolicyConditions)."""

import pytest

from tenancy.domain.value_objects import FieldEquals, PolicyConditions


def test_field_equals_holds_on_equal_value() -> None:
    assert FieldEquals("region", "EU").evaluate({"region": "EU"}) is True


@pytest.mark.parametrize("context", [{"region": "US"}, {}, None, {"other": "EU"}])
def test_field_equals_fails_on_mismatch_or_missing_key(context) -> None:
    assert FieldEquals("region", "EU").evaluate(context) is False


def test_field_equals_requires_field_name() -> None:
    with pytest.raises(ValueError):
        FieldEquals("", "EU")


def test_conditions_are_conjunctive() -> None:
    conditions = PolicyConditions(
        (FieldEquals("region", "EU"), FieldEquals("channel", "web"))
    )
    assert conditions.evaluate({"region": "EU", "channel": "web"}) is True
    assert conditions.evaluate({"region": "EU", "channel": "pos"}) is False
    assert conditions.evaluate({"region": "EU"}) is False


def test_empty_conditions_always_hold() -> None:
    conditions = PolicyConditions()
    assert conditions.is_empty
    assert conditions.evaluate(None) is True
    assert conditions.to_json() is None


def test_from_json_tagged_list() -> None:
    conditions = PolicyConditions.from_json(
        [{"kind": "field_equals", "field": "region", "value": "EU"}]
    )
    assert conditions.predicates == (FieldEquals("region", "EU"),)
    assert conditions.to_json() == [
        {"kind": "field_equals", "field": "region", "value": "EU"}
    ]


def test_from_json_legacy_flat_map() -> None:
    """Stored {"region": "EU"} reads as one field_equals predicate per key."""
    conditions = PolicyConditions.from_json({"region": "EU", "tier": 2})
    assert set(conditions.predicates) == {FieldEquals("region", "EU"), FieldEquals("tier", 2)}


def test_from_json_null_is_empty() -> None:
    assert PolicyConditions.from_json(None).is_empty


@pytest.mark.parametrize(
    "raw",
    [
        "region=EU",
        42,
        [{"kind": "regex", "field": "region", "value": "E.*"}],
        [{"kind": "field_equals", "field": "region"}],
        ["region"],
    ],
)
def test_from_json_rejects_unsupported_shapes(raw) -> None:
    with pytest.raises(ValueError):
        PolicyConditions.from_json(raw)
